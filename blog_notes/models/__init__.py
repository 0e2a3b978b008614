"""Data models for blog_notes."""

"""Logging support for blog_notes: correlation ids and the unified logger."""

"""blog_notes - reading notes for the blogs you follow, served over MCP."""

__version__ = "0.1.0"

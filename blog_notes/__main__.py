"""Main module for blog_notes MCP server.

This module allows the server to be run as a Python module using:
python -m blog_notes

It delegates to the server application's main function.
"""

from blog_notes.server.app import main

if __name__ == "__main__":
    main()

"""Command-line client for notionrag."""

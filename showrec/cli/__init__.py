"""Command-line tools for showrec."""

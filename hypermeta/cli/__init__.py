"""Command-line interface for hypermeta."""

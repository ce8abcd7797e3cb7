"""Command-line interface for shipctl."""

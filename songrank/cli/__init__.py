"""Command-line interface for interactive ranking sessions."""

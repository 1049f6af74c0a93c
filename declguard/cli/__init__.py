"""Command-line interface for declguard."""

"""Command-line interface for persistkit."""

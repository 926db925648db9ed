"""CLI commands for persistkit."""

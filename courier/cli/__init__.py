"""Command-line interface for courier."""

"""Command handlers, grouped by category."""

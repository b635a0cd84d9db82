"""Information commands."""

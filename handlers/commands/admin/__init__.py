"""Server administration commands."""

"""Context menu handlers."""

"""Handler packages used by the discovery tests."""

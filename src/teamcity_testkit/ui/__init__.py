"""Web UI automation."""

"""Runtime helpers (configuration loading)."""

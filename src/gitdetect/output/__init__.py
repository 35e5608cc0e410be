"""Report output — YAML persistence and terminal summary."""

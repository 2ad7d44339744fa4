"""Configuration value objects for injection."""

"""HTTP service exposing the gateway."""

"""Upstream data acquisition."""

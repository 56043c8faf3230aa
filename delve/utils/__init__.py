"""Shared helpers that are not tied to a single engine component."""

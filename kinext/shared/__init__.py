"""Shared utilities used across layers (logging setup, datetime helpers)."""

"""Tallyman adapters (protocol implementations)."""

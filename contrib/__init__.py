"""Tallyman contrib apps."""

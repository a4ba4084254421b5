"""Utility helpers for bzlgen."""

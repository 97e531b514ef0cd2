"""Helpers shared across payment services."""

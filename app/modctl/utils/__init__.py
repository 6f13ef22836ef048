"""Utility functions for modctl."""

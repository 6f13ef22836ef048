"""CLI package for modctl."""

"""Core logic for modctl: manifest I/O, HTTP, validation, reconciliation."""

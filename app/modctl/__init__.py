"""modctl - Declarative mod directory synchronization.

Keeps a directory of mod archives in line with a manifest and keeps
its own executable up to date.
"""

__version__ = "0.3.0"

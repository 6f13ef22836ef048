"""Self-update for the standalone modctl executable."""

from modctl.update.updater import SelfUpdater, UpdateResult, UpdateState

__all__ = ["SelfUpdater", "UpdateResult", "UpdateState"]

"""
Eviction of expired pastes.
"""
import logging

from pastebin.errors import StorageUnavailable
from pastebin.store import PasteStore

logger = logging.getLogger(__name__)


class Reaper:
    """Removes every expired paste from a store, one cycle at a time."""

    def __init__(self, store: PasteStore):
        self.store = store

    def reap_once(self) -> int:
        """
        Run a single cleanup cycle.

        Takes a snapshot of expired slugs first, then deletes them one by one.
        A failed deletion is logged and skipped; the paste is still expired,
        so the next cycle picks it up again.

        Returns:
            Number of pastes removed
        """
        try:
            expired = self.store.expired_slugs()
        except StorageUnavailable as e:
            logger.error(f"Reaper could not scan the store: {e}")
            return 0

        removed = 0
        for slug in expired:
            try:
                self.store.delete(slug)
                removed += 1
            except StorageUnavailable as e:
                logger.error(f"Reaper failed to delete paste {slug}: {e}")

        if removed:
            logger.info(f"Reaper removed {removed}/{len(expired)} expired pastes")
        return removed

"""
Lifecycle hooks binding a store to its host's init and teardown phases.
"""

import logging

from .interfaces import ManagedStorage

logger = logging.getLogger(__name__)


class StorageLifeCycleHooks:
    """
    Runs a store's load on init and persist + close on destroy.

    The host calls on_init once when the storage context starts and
    on_destroy once when it ends.
    """

    def __init__(self, storage: ManagedStorage):
        self.storage = storage

    def on_init(self) -> None:
        """Load the table into memory."""
        logger.debug(f"Init hook: loading {type(self.storage).__name__}")
        self.storage.load()

    def on_destroy(self) -> None:
        """Persist changes, then release the connection even if persisting failed."""
        logger.debug(f"Destroy hook: persisting and closing {type(self.storage).__name__}")
        try:
            self.storage.persist()
        finally:
            self.storage.close()

import logging
import threading

from django.conf import settings

from .base import (  # noqa: F401
    COLLECTIONS, IDENTITIES, INTERNS, PAST_INTERNS, PENDING_STUDENTS, PROJECTS,
    DuplicateKey, Store, StoreError, UnknownField,
)

logger = logging.getLogger(__name__)

_lock = threading.Lock()
_store = None


def open_store(options):
    """Build the store described by a ``PORTAL_STORE`` settings dict."""
    backend = options.get('BACKEND', 'relational')
    if backend == 'relational':
        from .relational import RelationalStore
        return RelationalStore()
    if backend == 'document':
        from .document import DocumentStore
        return DocumentStore.connect(
            options['MONGO_URI'],
            options['MONGO_DB_NAME'],
            timeout_ms=options.get('MONGO_TIMEOUT_MS', 5000),
            retries=options.get('MONGO_CONNECT_RETRIES', 3),
        )
    raise StoreError(f"Unknown store backend '{backend}'")


def get_store():
    """Process-wide store, opened on first use."""
    global _store
    with _lock:
        if _store is None:
            _store = open_store(settings.PORTAL_STORE)
            logger.info("Opened %s store", _store.__class__.__name__)
        return _store


def close_store():
    global _store
    with _lock:
        if _store is not None:
            _store.close()
            _store = None

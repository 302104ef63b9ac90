"""
Persistence collaborator used by the portal services.

Records are plain dicts with a string ``id``. Embedded entries (attendance,
progress updates, project tasks and feedback) are lists of dicts that also
carry a string ``id``. The services only rely on the primitives declared
here, so the same code runs on the relational and the document store.
"""

from abc import ABC, abstractmethod

IDENTITIES = 'identities'
PENDING_STUDENTS = 'pending_students'
PROJECTS = 'projects'
INTERNS = 'interns'
PAST_INTERNS = 'past_interns'

COLLECTIONS = (IDENTITIES, PENDING_STUDENTS, PROJECTS, INTERNS, PAST_INTERNS)


class StoreError(Exception):
    """Base class for persistence failures."""


class DuplicateKey(StoreError):
    """Raised when an insert or update violates a unique constraint."""


class UnknownField(StoreError):
    """Raised when a field is not a scalar or embedded list of the collection."""


class Store(ABC):

    @abstractmethod
    def get(self, collection, record_id):
        """Return the record with ``record_id`` or ``None``."""

    @abstractmethod
    def find_one(self, collection, *criteria, exclude_id=None):
        """
        Return the first record matching any of ``criteria``.

        Each criterion is a dict of field equalities; the criteria are
        OR-ed together. ``exclude_id`` skips the record with that id.
        """

    @abstractmethod
    def find(self, collection, criteria=None, ids=None):
        """Return records matching ``criteria`` (and ``ids`` when given), oldest first."""

    @abstractmethod
    def insert(self, collection, record):
        """Insert ``record`` and return it as stored, with its new ``id``."""

    @abstractmethod
    def update(self, collection, record_id, changes):
        """Set scalar fields on a record. Returns ``False`` if it does not exist."""

    @abstractmethod
    def delete(self, collection, record_id):
        """Delete a record. Returns ``False`` if it did not exist."""

    @abstractmethod
    def push(self, collection, record_id, field, *entries):
        """Append entries to an embedded list and return them with their ids."""

    @abstractmethod
    def find_entry(self, collection, field, entry_id):
        """Return ``(record, entry)`` for an embedded entry id, or ``(None, None)``."""

    @abstractmethod
    def update_entry(self, collection, record_id, field, entry_id, changes):
        """Set fields on one embedded entry. Returns ``False`` if it does not exist."""

    @abstractmethod
    def assign(self, project_ids, identity_ids):
        """Link projects and identities on both sides; linking twice is a no-op."""

    @abstractmethod
    def unassign(self, project_ids, identity_ids):
        """Remove project/identity links on both sides."""

    @abstractmethod
    def transaction(self):
        """Context manager grouping writes where the store supports it."""

    def close(self):
        """Release connections held by the store."""

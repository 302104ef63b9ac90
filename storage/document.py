"""Store implementation on top of MongoDB through pymongo."""

import contextlib
import logging
import time

from bson import ObjectId
from pymongo import ASCENDING, MongoClient
from pymongo.errors import ConnectionFailure, DuplicateKeyError

from .base import (
    IDENTITIES, INTERNS, PAST_INTERNS, PENDING_STUDENTS, PROJECTS,
    DuplicateKey, Store, StoreError, UnknownField,
)

logger = logging.getLogger(__name__)

# Embedded lists whose entries get their own ids
ENTRY_FIELDS = {
    IDENTITIES: ('attendance', 'progress_updates'),
    INTERNS: ('attendance', 'daily_progress'),
    PROJECTS: ('tasks', 'feedback'),
    PENDING_STUDENTS: (),
    PAST_INTERNS: (),
}

LINK_FIELDS = {
    IDENTITIES: 'assigned_projects',
    PROJECTS: 'assigned_to',
}

UNIQUE_INDEXES = [
    (IDENTITIES, 'username'),
    (IDENTITIES, 'email'),
    (PENDING_STUDENTS, 'username'),
    (PENDING_STUDENTS, 'email'),
    (PAST_INTERNS, 'source_intern_id'),
]


def _oid(record_id):
    if isinstance(record_id, ObjectId):
        return record_id
    if record_id is not None and ObjectId.is_valid(str(record_id)):
        return ObjectId(str(record_id))
    return None


def _with_entry_ids(entries):
    return [dict(entry, id=entry.get('id') or str(ObjectId())) for entry in entries]


class DocumentStore(Store):

    def __init__(self, database, client=None):
        self.db = database
        self.client = client

    @classmethod
    def connect(cls, uri, db_name, timeout_ms=5000, retries=3):
        """Connect with bounded retries and exponential backoff, then build indexes."""
        client = MongoClient(
            uri,
            tz_aware=True,
            serverSelectionTimeoutMS=timeout_ms,
            connectTimeoutMS=timeout_ms,
        )
        delay = 0.5
        for attempt in range(1, retries + 1):
            try:
                client.admin.command('ping')
                break
            except ConnectionFailure as exc:
                if attempt == retries:
                    client.close()
                    raise StoreError(f"Could not connect to MongoDB after {retries} attempts") from exc
                logger.warning("MongoDB ping failed (attempt %s/%s), retrying in %.1fs", attempt, retries, delay)
                time.sleep(delay)
                delay *= 2
        logger.info("Connected to MongoDB database %s", db_name)
        store = cls(client[db_name], client=client)
        store.ensure_indexes()
        return store

    def ensure_indexes(self):
        for collection, field in UNIQUE_INDEXES:
            self.db[collection].create_index([(field, ASCENDING)], unique=True)

    def _to_doc(self, raw):
        if raw is None:
            return None
        doc = dict(raw)
        doc['id'] = str(doc.pop('_id'))
        return doc

    def _filter(self, criteria):
        query = {}
        for key, value in criteria.items():
            if key == 'id':
                query['_id'] = _oid(value)
            else:
                query[key] = value
        return query

    def get(self, collection, record_id):
        oid = _oid(record_id)
        if oid is None:
            return None
        return self._to_doc(self.db[collection].find_one({'_id': oid}))

    def find_one(self, collection, *criteria, exclude_id=None):
        query = {'$or': [self._filter(criterion) for criterion in criteria]} if criteria else {}
        if exclude_id is not None:
            query['_id'] = {'$ne': _oid(exclude_id)}
        raw = self.db[collection].find_one(query, sort=[('_id', ASCENDING)])
        return self._to_doc(raw)

    def find(self, collection, criteria=None, ids=None):
        query = self._filter(criteria or {})
        if ids is not None:
            query['_id'] = {'$in': [oid for oid in map(_oid, ids) if oid is not None]}
        return [self._to_doc(raw) for raw in self.db[collection].find(query).sort('_id', ASCENDING)]

    def insert(self, collection, record):
        doc = {key: value for key, value in record.items() if key != 'id'}
        for field in ENTRY_FIELDS[collection]:
            doc[field] = _with_entry_ids(doc.get(field) or [])
        if collection in LINK_FIELDS:
            doc[LINK_FIELDS[collection]] = [str(pk) for pk in doc.get(LINK_FIELDS[collection]) or []]
        try:
            result = self.db[collection].insert_one(doc)
        except DuplicateKeyError as exc:
            raise DuplicateKey(str(exc)) from exc
        return self.get(collection, result.inserted_id)

    def update(self, collection, record_id, changes):
        for key in changes:
            if key in ENTRY_FIELDS[collection] or key == LINK_FIELDS.get(collection):
                raise UnknownField(key)
        oid = _oid(record_id)
        if oid is None:
            return False
        try:
            result = self.db[collection].update_one({'_id': oid}, {'$set': dict(changes)})
        except DuplicateKeyError as exc:
            raise DuplicateKey(str(exc)) from exc
        return result.matched_count > 0

    def delete(self, collection, record_id):
        oid = _oid(record_id)
        if oid is None:
            return False
        return self.db[collection].delete_one({'_id': oid}).deleted_count > 0

    def push(self, collection, record_id, field, *entries):
        if field not in ENTRY_FIELDS[collection]:
            raise UnknownField(field)
        entries = _with_entry_ids(entries)
        oid = _oid(record_id)
        if oid is None:
            return None
        result = self.db[collection].update_one({'_id': oid}, {'$push': {field: {'$each': entries}}})
        return entries if result.matched_count else None

    def find_entry(self, collection, field, entry_id):
        if field not in ENTRY_FIELDS[collection]:
            raise UnknownField(field)
        doc = self._to_doc(self.db[collection].find_one({f'{field}.id': str(entry_id)}))
        if doc is None:
            return None, None
        entry = next(item for item in doc[field] if item.get('id') == str(entry_id))
        return doc, entry

    def update_entry(self, collection, record_id, field, entry_id, changes):
        oid = _oid(record_id)
        if oid is None:
            return False
        result = self.db[collection].update_one(
            {'_id': oid, f'{field}.id': str(entry_id)},
            {'$set': {f'{field}.$.{key}': value for key, value in changes.items()}},
        )
        return result.matched_count > 0

    def assign(self, project_ids, identity_ids):
        project_ids = [str(pk) for pk in project_ids]
        identity_ids = [str(pk) for pk in identity_ids]
        self.db[PROJECTS].update_many(
            {'_id': {'$in': [_oid(pk) for pk in project_ids]}},
            {'$addToSet': {'assigned_to': {'$each': identity_ids}}},
        )
        self.db[IDENTITIES].update_many(
            {'_id': {'$in': [_oid(pk) for pk in identity_ids]}},
            {'$addToSet': {'assigned_projects': {'$each': project_ids}}},
        )

    def unassign(self, project_ids, identity_ids):
        project_ids = [str(pk) for pk in project_ids]
        identity_ids = [str(pk) for pk in identity_ids]
        self.db[PROJECTS].update_many(
            {'_id': {'$in': [_oid(pk) for pk in project_ids]}},
            {'$pull': {'assigned_to': {'$in': identity_ids}}},
        )
        self.db[IDENTITIES].update_many(
            {'_id': {'$in': [_oid(pk) for pk in identity_ids]}},
            {'$pull': {'assigned_projects': {'$in': project_ids}}},
        )

    def transaction(self):
        # Multi-document transactions need a replica set; writes are applied one by one
        return contextlib.nullcontext()

    def close(self):
        if self.client is not None:
            self.client.close()

"""Store implementation on top of the Django ORM."""

import logging

from django.db import IntegrityError, transaction
from django.db.models import Q

from accounts.models import PendingStudent, User
from attendance.models import AttendanceEntry, ProgressUpdate
from interns.models import Intern, PastIntern
from projects.models import Assignment, Project, ProjectFeedback, ProjectTask

from .base import (
    IDENTITIES, INTERNS, PAST_INTERNS, PENDING_STUDENTS, PROJECTS,
    DuplicateKey, Store, UnknownField,
)

logger = logging.getLogger(__name__)

PROFILE_FIELDS = [
    'name', 'email', 'username', 'password', 'contact_number', 'program', 'university',
    'graduation_year', 'bio', 'attributes', 'notification_settings', 'security_settings',
]
INTERN_FIELDS = [
    'name', 'email', 'identity_id', 'joining_date', 'end_date', 'duration', 'progress',
    'project_rating', 'tasks', 'status', 'university',
]
ATTENDANCE_FIELDS = ['date', 'status', 'time_in', 'time_out', 'notes']
PROGRESS_FIELDS = ['content', 'timestamp', 'feedback', 'has_admin_feedback', 'feedback_date']


class Child:
    """An embedded list stored as rows of ``model`` pointing back through ``fk``."""

    def __init__(self, model, fk, fields, renamed=None):
        self.model = model
        self.fk = fk
        self.fields = fields
        self.renamed = renamed or {}

    def column(self, key):
        return self.renamed.get(key, key)

    def rows(self, parent_pk):
        return self.model.objects.filter(**{f'{self.fk}_id': parent_pk}).order_by('id')

    def to_entry(self, row):
        entry = {'id': str(row.pk)}
        for key in self.fields:
            entry[key] = getattr(row, self.column(key))
        return entry

    def build(self, parent_pk, entry):
        values = {self.column(key): entry[key] for key in self.fields if entry.get(key) is not None}
        values[f'{self.fk}_id'] = parent_pk
        return self.model(**values)


class Mapping:
    def __init__(self, model, fields, renamed=None, children=None, links=None, id_fields=()):
        self.model = model
        self.fields = fields
        self.renamed = renamed or {}
        self.children = children or {}
        self.links = links or {}
        self.id_fields = set(id_fields)

    def column(self, key):
        if key == 'id':
            return 'pk'
        return self.renamed.get(key, key)


def _identity_links(pk):
    return Assignment.objects.filter(identity_id=pk).order_by('id').values_list('project_id', flat=True)


def _project_links(pk):
    return Assignment.objects.filter(project_id=pk).order_by('id').values_list('identity_id', flat=True)


MAPPINGS = {
    IDENTITIES: Mapping(
        User,
        PROFILE_FIELDS + [
            'role', 'is_active', 'department', 'domain', 'resume', 'profile_picture',
            'created_at', 'last_active', 'last_login',
        ],
        renamed={'created_at': 'date_joined'},
        children={
            'attendance': Child(AttendanceEntry, 'identity', ATTENDANCE_FIELDS),
            'progress_updates': Child(ProgressUpdate, 'identity', PROGRESS_FIELDS),
        },
        links={'assigned_projects': _identity_links},
    ),
    PENDING_STUDENTS: Mapping(PendingStudent, PROFILE_FIELDS + ['created_at']),
    PROJECTS: Mapping(
        Project,
        ['title', 'description', 'status', 'start_date', 'end_date', 'created_by', 'last_modified'],
        children={
            'tasks': Child(ProjectTask, 'project', ['description', 'is_complete', 'due_date']),
            'feedback': Child(ProjectFeedback, 'project', ['comment', 'date', 'from', 'student_id'],
                              renamed={'from': 'sender'}),
        },
        links={'assigned_to': _project_links},
    ),
    INTERNS: Mapping(
        Intern,
        INTERN_FIELDS,
        children={
            'attendance': Child(AttendanceEntry, 'intern', ATTENDANCE_FIELDS),
            'daily_progress': Child(ProgressUpdate, 'intern', PROGRESS_FIELDS),
        },
        id_fields=['identity_id'],
    ),
    PAST_INTERNS: Mapping(
        PastIntern,
        INTERN_FIELDS + ['source_intern_id', 'attendance', 'daily_progress', 'deleted_at', 'deleted_projects'],
        id_fields=['identity_id'],
    ),
}


def _pk(record_id):
    try:
        return int(record_id)
    except (TypeError, ValueError):
        return None


class RelationalStore(Store):

    def _mapping(self, collection):
        return MAPPINGS[collection]

    def _to_doc(self, mapping, obj):
        doc = {'id': str(obj.pk)}
        for key in mapping.fields:
            value = getattr(obj, mapping.column(key))
            if key in mapping.id_fields and value is not None:
                value = str(value)
            doc[key] = value
        for key, child in mapping.children.items():
            doc[key] = [child.to_entry(row) for row in child.rows(obj.pk)]
        for key, links in mapping.links.items():
            doc[key] = [str(pk) for pk in links(obj.pk)]
        return doc

    def _query(self, mapping, criteria):
        q = Q()
        for key, value in criteria.items():
            if key not in mapping.fields and key != 'id':
                raise UnknownField(key)
            if key == 'id' or key in mapping.id_fields:
                value = _pk(value)
            q &= Q(**{mapping.column(key): value})
        return q

    def get(self, collection, record_id):
        mapping = self._mapping(collection)
        pk = _pk(record_id)
        if pk is None:
            return None
        obj = mapping.model.objects.filter(pk=pk).first()
        return self._to_doc(mapping, obj) if obj else None

    def find_one(self, collection, *criteria, exclude_id=None):
        mapping = self._mapping(collection)
        q = Q()
        for criterion in criteria:
            q |= self._query(mapping, criterion)
        qs = mapping.model.objects.filter(q)
        if exclude_id is not None:
            qs = qs.exclude(pk=_pk(exclude_id))
        obj = qs.order_by('pk').first()
        return self._to_doc(mapping, obj) if obj else None

    def find(self, collection, criteria=None, ids=None):
        mapping = self._mapping(collection)
        qs = mapping.model.objects.filter(self._query(mapping, criteria or {}))
        if ids is not None:
            qs = qs.filter(pk__in=[pk for pk in map(_pk, ids) if pk is not None])
        return [self._to_doc(mapping, obj) for obj in qs.order_by('pk')]

    def insert(self, collection, record):
        mapping = self._mapping(collection)
        values = {}
        for key in mapping.fields:
            if record.get(key) is not None:
                values[mapping.column(key)] = record[key]
        if collection == IDENTITIES:
            # admins can also sign in to the Django admin site
            values['is_staff'] = record.get('role') == 'admin'
        try:
            with transaction.atomic():
                obj = mapping.model.objects.create(**values)
                for key, child in mapping.children.items():
                    entries = record.get(key) or []
                    child.model.objects.bulk_create([child.build(obj.pk, entry) for entry in entries])
                for key in mapping.links:
                    linked = record.get(key) or []
                    if collection == IDENTITIES:
                        self.assign(linked, [obj.pk])
                    else:
                        self.assign([obj.pk], linked)
        except IntegrityError as exc:
            raise DuplicateKey(str(exc)) from exc
        return self.get(collection, obj.pk)

    def update(self, collection, record_id, changes):
        mapping = self._mapping(collection)
        values = {}
        for key, value in changes.items():
            if key not in mapping.fields:
                raise UnknownField(key)
            values[mapping.column(key)] = value
        pk = _pk(record_id)
        if pk is None:
            return False
        try:
            with transaction.atomic():
                return mapping.model.objects.filter(pk=pk).update(**values) > 0
        except IntegrityError as exc:
            raise DuplicateKey(str(exc)) from exc

    def delete(self, collection, record_id):
        mapping = self._mapping(collection)
        pk = _pk(record_id)
        if pk is None:
            return False
        deleted, _ = mapping.model.objects.filter(pk=pk).delete()
        return deleted > 0

    def push(self, collection, record_id, field, *entries):
        mapping = self._mapping(collection)
        child = mapping.children.get(field)
        if child is None:
            raise UnknownField(field)
        pk = _pk(record_id)
        if pk is None or not mapping.model.objects.filter(pk=pk).exists():
            return None
        rows = [child.build(pk, entry) for entry in entries]
        for row in rows:
            row.save()
        return [child.to_entry(row) for row in rows]

    def find_entry(self, collection, field, entry_id):
        mapping = self._mapping(collection)
        child = mapping.children.get(field)
        if child is None:
            raise UnknownField(field)
        pk = _pk(entry_id)
        row = child.model.objects.filter(pk=pk, **{f'{child.fk}__isnull': False}).first() if pk else None
        if row is None:
            return None, None
        return self.get(collection, getattr(row, f'{child.fk}_id')), child.to_entry(row)

    def update_entry(self, collection, record_id, field, entry_id, changes):
        mapping = self._mapping(collection)
        child = mapping.children.get(field)
        if child is None:
            raise UnknownField(field)
        values = {child.column(key): value for key, value in changes.items()}
        rows = child.model.objects.filter(pk=_pk(entry_id), **{f'{child.fk}_id': _pk(record_id)})
        return rows.update(**values) > 0

    def assign(self, project_ids, identity_ids):
        for project_id in project_ids:
            for identity_id in identity_ids:
                Assignment.objects.get_or_create(project_id=_pk(project_id), identity_id=_pk(identity_id))

    def unassign(self, project_ids, identity_ids):
        Assignment.objects.filter(
            project_id__in=[_pk(pk) for pk in project_ids],
            identity_id__in=[_pk(pk) for pk in identity_ids],
        ).delete()

    def transaction(self):
        return transaction.atomic()

"""
Intern lifecycle: creation with task fan-out, updates, read views that
merge the intern record with its linked identity, credential rotation and
archival into a past-intern snapshot.

An intern is an employment record (``interns`` collection) that may be
linked to a login identity. Admins record attendance and daily progress on
the intern record; the student reports theirs on the identity. Every read
merges both.
"""

import logging

from django.conf import settings
from django.contrib.auth.hashers import make_password

from accounts.registration import new_identity, public_identity
from attendance.merge import (
    ATTENDANCE_OPTIONAL, NOT_AVAILABLE, PROGRESS_OPTIONAL,
    attendance_stats, fill_missing, merge_attendance, merge_progress,
)
from attendance.qr import check_qr_token, qr_attendance_entry
from portal.dates import as_datetime, isoformat, now
from portal.exceptions import BadRequest, Conflict, NotFound
from projects.models import Project
from projects.services import new_project
from storage import IDENTITIES, INTERNS, PAST_INTERNS, PENDING_STUDENTS, PROJECTS, DuplicateKey

logger = logging.getLogger(__name__)

DEFAULT_DURATION = 3

# Intern fields carried into the past-intern snapshot unchanged
CARRIED_FIELDS = (
    'name', 'email', 'identity_id', 'joining_date', 'end_date', 'duration', 'progress',
    'project_rating', 'tasks', 'status', 'university',
)


def parse_tasks(tasks):
    """Accept a list of task names or a comma separated string."""
    if not tasks:
        return []
    if isinstance(tasks, str):
        tasks = tasks.split(',')
    # one entry per distinct name, first occurrence wins
    return list(dict.fromkeys(task.strip() for task in tasks if task and task.strip()))


def _frozen(entries):
    """JSON-ready copy of entries for an archive snapshot."""
    frozen = []
    for entry in entries:
        frozen.append({
            key: isoformat(value) if key in ('date', 'timestamp', 'feedback_date', 'due_date') else value
            for key, value in entry.items()
        })
    return frozen


class InternLifecycle:

    def __init__(self, store, archive_deletes_projects=None):
        self.store = store
        if archive_deletes_projects is None:
            archive_deletes_projects = settings.PORTAL_ARCHIVE_DELETES_PROJECTS
        self.archive_deletes_projects = archive_deletes_projects

    # -- reads ------------------------------------------------------------

    def _intern(self, intern_id):
        intern = self.store.get(INTERNS, intern_id)
        if not intern:
            raise NotFound("Intern not found")
        return intern

    def _identity_for(self, intern):
        if not intern.get('identity_id'):
            return None
        return self.store.get(IDENTITIES, intern['identity_id'])

    def view(self, intern, identity=None):
        """Merged read view of an intern and its linked identity."""
        attendance = merge_attendance(
            intern.get('attendance'), identity.get('attendance') if identity else None,
        )
        progress = merge_progress(
            intern.get('daily_progress'), identity.get('progress_updates') if identity else None,
        )
        return {
            'id': intern['id'],
            'name': identity['name'] if identity else intern['name'],
            'email': identity['email'] if identity else intern['email'],
            'progress': intern.get('progress') or 0,
            'duration': intern.get('duration') or DEFAULT_DURATION,
            'status': intern.get('status') or 'Active',
            'joining_date': intern.get('joining_date'),
            'end_date': intern.get('end_date') or NOT_AVAILABLE,
            'tasks': intern.get('tasks') or [],
            'university': intern.get('university') or NOT_AVAILABLE,
            'attendance': [fill_missing(entry, ATTENDANCE_OPTIONAL) for entry in attendance],
            'daily_progress': [fill_missing(entry, PROGRESS_OPTIONAL) for entry in progress],
            'student': {
                'id': identity['id'],
                'name': identity['name'],
                'email': identity['email'],
                'username': identity['username'],
            } if identity else NOT_AVAILABLE,
        }

    def list_interns(self):
        interns = self.store.find(INTERNS)
        identity_ids = [intern['identity_id'] for intern in interns if intern.get('identity_id')]
        identities = {identity['id']: identity for identity in self.store.find(IDENTITIES, ids=identity_ids)}
        views = [self.view(intern, identities.get(intern.get('identity_id'))) for intern in interns]
        logger.info("Found %s current interns", len(views))
        return views

    def get_intern(self, intern_id):
        intern = self._intern(intern_id)
        return self.view(intern, self._identity_for(intern))

    # -- create / update --------------------------------------------------

    def _username_taken(self, username, identity_id=None):
        if self.store.find_one(IDENTITIES, {'username': username}, exclude_id=identity_id):
            return True
        return self.store.find_one(PENDING_STUDENTS, {'username': username}) is not None

    def _create_task_projects(self, identity, intern_name, task_names):
        """Create one Not Started project per task and assign it to the identity."""
        project_ids = []
        for task_name in task_names:
            project = self.store.insert(PROJECTS, new_project(
                task_name, f"Task assigned to {intern_name}: {task_name}",
            ))
            project_ids.append(project['id'])
        if project_ids:
            self.store.assign(project_ids, [identity['id']])
            logger.info("%s projects created and assigned to student %s", len(project_ids), identity['id'])
        return project_ids

    def create(self, name, email, duration=None, tasks=None, username=None, password=None,
               identity_id=None, joining_date=None, university=None):
        if not name or not email:
            raise BadRequest("Name and email are required")
        if bool(username) != bool(password):
            raise BadRequest("Username and password must be provided together")
        task_names = parse_tasks(tasks)
        logger.info("Adding new intern %s (%s tasks)", name, len(task_names))

        identity = None
        if identity_id:
            identity = self.store.get(IDENTITIES, identity_id)
            if not identity:
                raise NotFound("Student not found")
            if self.store.find_one(INTERNS, {'identity_id': identity['id']}):
                raise Conflict("Student already has an active internship")
        if username and self._username_taken(username, identity['id'] if identity else None):
            raise Conflict("Username already exists")

        with self.store.transaction():
            if username and password:
                if identity:
                    self.store.update(IDENTITIES, identity['id'], {
                        'username': username, 'password': make_password(password),
                    })
                    identity['username'] = username
                else:
                    if self.store.find_one(IDENTITIES, {'email': email}) or \
                            self.store.find_one(PENDING_STUDENTS, {'email': email}, {'username': username}):
                        raise Conflict("Email or username is already in use")
                    try:
                        identity = self.store.insert(
                            IDENTITIES, new_identity(name, email, username, make_password(password)),
                        )
                    except DuplicateKey as exc:
                        raise Conflict("Username already exists") from exc
                    logger.info("New student account created: %s", identity['id'])

            intern = self.store.insert(INTERNS, {
                'name': name,
                'email': email,
                'identity_id': identity['id'] if identity else None,
                'joining_date': as_datetime(joining_date) or now(),
                'duration': duration or DEFAULT_DURATION,
                'progress': 0,
                'project_rating': 0,
                'tasks': task_names,
                'status': 'Active',
                'university': university,
                'attendance': [],
                'daily_progress': [],
            })
            if identity and task_names:
                self._create_task_projects(identity, name, task_names)

        logger.info("Intern saved successfully: %s", intern['id'])
        return {
            'intern': self.get_intern(intern['id']),
            'student_account': {'id': identity['id'], 'username': identity['username']} if identity else None,
        }

    def update(self, intern_id, name=None, email=None, joining_date=None, duration=None, tasks=None):
        intern = self._intern(intern_id)
        changes = {}
        if name:
            changes['name'] = name
        if email:
            changes['email'] = email
        if joining_date:
            changes['joining_date'] = as_datetime(joining_date)
        if duration:
            changes['duration'] = duration

        with self.store.transaction():
            if tasks:
                incoming = parse_tasks(tasks)
                existing = intern.get('tasks') or []
                changes['tasks'] = incoming
                # projects of dropped tasks are kept as history
                added = [task for task in incoming if task not in existing]
                identity = self._identity_for(intern)
                if identity and added:
                    self._create_task_projects(identity, changes.get('name', intern['name']), added)
            if changes:
                self.store.update(INTERNS, intern_id, changes)
        return self.get_intern(intern_id)

    def update_credentials(self, intern_id, username=None, password=None):
        intern = self._intern(intern_id)
        if not intern.get('identity_id'):
            raise BadRequest("No student account linked to this intern")
        if username and self._username_taken(username, intern['identity_id']):
            raise Conflict("Username already exists")
        changes = {}
        if username:
            changes['username'] = username
        if password:
            changes['password'] = make_password(password)
        if changes:
            try:
                self.store.update(IDENTITIES, intern['identity_id'], changes)
            except DuplicateKey as exc:
                raise Conflict("Username already exists") from exc
        logger.info("Credentials updated for intern %s", intern_id)

    # -- attendance and progress -----------------------------------------

    def record_attendance(self, intern_id, status, date=None, time_in=None, time_out=None, notes=None):
        self._intern(intern_id)
        saved, = self.store.push(INTERNS, intern_id, 'attendance', {
            'date': as_datetime(date) or now(),
            'status': status,
            'time_in': time_in,
            'time_out': time_out,
            'notes': notes,
        })
        return saved

    def mark_qr_attendance(self, intern_id, qr_token):
        check_qr_token(qr_token)
        self._intern(intern_id)
        saved, = self.store.push(INTERNS, intern_id, 'attendance', qr_attendance_entry())
        return saved

    def record_progress(self, intern_id, content):
        if not content:
            raise BadRequest("Progress content is required")
        intern = self._intern(intern_id)
        saved, = self.store.push(INTERNS, intern_id, 'daily_progress', {
            'content': content,
            'timestamp': now(),
            'has_admin_feedback': False,
        })
        total_tasks = len(intern.get('tasks') or [])
        progress = intern.get('progress') or 0
        if total_tasks:
            updates = len(intern.get('daily_progress') or []) + 1
            progress = min(round(updates / total_tasks * 100), 100)
            self.store.update(INTERNS, intern_id, {'progress': progress})
        return {'progress': progress, 'update': saved}

    # -- archival ---------------------------------------------------------

    def _snapshot_projects(self, identity):
        if not identity or not identity.get('assigned_projects'):
            return [], []
        projects = self.store.find(PROJECTS, ids=identity['assigned_projects'])
        snapshot = [
            {'title': project['title'], 'description': project['description'], 'status': project['status']}
            for project in projects
        ]
        return [project['id'] for project in projects], snapshot

    def archive(self, intern_id):
        """
        Move an intern to the past interns.

        The snapshot is keyed by the intern id: a retry after a partial
        failure finds the existing snapshot and only finishes the cleanup.
        Cleanup unassigns the student from its projects, deletes them only
        when ``archive_deletes_projects`` is set, deactivates the linked
        identity and removes the intern record last.
        """
        intern = self.store.get(INTERNS, intern_id)
        past = self.store.find_one(PAST_INTERNS, {'source_intern_id': str(intern_id)})
        if intern is None:
            if past is None:
                raise NotFound("Intern not found")
            return past

        identity = self._identity_for(intern)
        project_ids, snapshot = self._snapshot_projects(identity)

        with self.store.transaction():
            if past is None:
                record = {key: intern.get(key) for key in CARRIED_FIELDS}
                record.update({
                    'source_intern_id': str(intern_id),
                    'attendance': _frozen(merge_attendance(
                        intern.get('attendance'), identity.get('attendance') if identity else None,
                    )),
                    'daily_progress': _frozen(merge_progress(
                        intern.get('daily_progress'), identity.get('progress_updates') if identity else None,
                    )),
                    'deleted_at': now(),
                    'deleted_projects': snapshot,
                })
                try:
                    past = self.store.insert(PAST_INTERNS, record)
                except DuplicateKey:
                    past = self.store.find_one(PAST_INTERNS, {'source_intern_id': str(intern_id)})
            else:
                logger.info("Resuming archival of intern %s into %s", intern_id, past['id'])

            if identity:
                if project_ids:
                    self.store.unassign(project_ids, [identity['id']])
                    if self.archive_deletes_projects:
                        for project_id in project_ids:
                            self.store.delete(PROJECTS, project_id)
                        logger.info("Deleted %s projects for intern %s", len(project_ids), intern['name'])
                self.store.update(IDENTITIES, identity['id'], {'is_active': False})
            self.store.delete(INTERNS, intern_id)

        logger.info("Intern %s moved to past interns as %s", intern_id, past['id'])
        return past

    # -- past interns -----------------------------------------------------

    def list_past(self):
        past_interns = self.store.find(PAST_INTERNS)
        return sorted(past_interns, key=lambda past: as_datetime(past['deleted_at']), reverse=True)

    def get_past(self, past_id):
        past = self.store.get(PAST_INTERNS, past_id)
        if not past:
            raise NotFound("Past intern not found")
        identity = self.store.get(IDENTITIES, past['identity_id']) if past.get('identity_id') else None
        deleted_projects = past.get('deleted_projects') or []
        attendance = past.get('attendance') or []
        return {
            'id': past['id'],
            'name': identity['name'] if identity else past['name'],
            'email': identity['email'] if identity else past['email'],
            'duration': past.get('duration') or DEFAULT_DURATION,
            'joining_date': past.get('joining_date'),
            'end_date': past.get('end_date') or past['deleted_at'],
            'tasks': past.get('tasks') or [],
            'attendance': attendance,
            'progress_updates': past.get('daily_progress') or [],
            'deleted_projects': deleted_projects,
            'completion_rate': past.get('progress') or 0,
            'student': public_identity(identity) if identity else NOT_AVAILABLE,
            'stats': {
                'completed_projects': sum(1 for p in deleted_projects if p.get('status') == Project.COMPLETED),
                'total_projects': len(deleted_projects),
                'attendance': attendance_stats(attendance),
            },
        }

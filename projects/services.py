"""
Project store operations and the project status state machine.

Projects start ``Not Started``. A student's progress submission moves a
``Not Started`` project to ``In Progress``; admins may set any status, with
no ordering enforced between states. Feedback is append-only and every
mutation refreshes ``last_modified``.
"""

import logging

from accounts.identities import is_admin
from portal.dates import as_datetime, later_than, now
from portal.exceptions import BadRequest, Forbidden, NotFound
from storage import IDENTITIES, PROJECTS

from .models import Project

logger = logging.getLogger(__name__)

STATUSES = [value for value, _ in Project.STATUS_CHOICES]


def new_project(title, description, created_by='admin', end_date=None, tasks=None):
    current = now()
    return {
        'title': title,
        'description': description,
        'status': Project.NOT_STARTED,
        'start_date': current,
        'end_date': as_datetime(end_date),
        'assigned_to': [],
        'created_by': created_by,
        'tasks': [
            {
                'description': task.get('description', ''),
                'is_complete': bool(task.get('is_complete', False)),
                'due_date': as_datetime(task.get('due_date')),
            }
            for task in tasks or []
        ],
        'feedback': [],
        'last_modified': current,
    }


class ProjectService:

    def __init__(self, store):
        self.store = store

    def get(self, project_id):
        project = self.store.get(PROJECTS, project_id)
        if not project:
            raise NotFound("Project not found")
        return project

    def _with_assignees(self, project):
        identities = self.store.find(IDENTITIES, ids=project.get('assigned_to') or [])
        return dict(project, assigned_to=[
            {'id': identity['id'], 'name': identity['name'], 'email': identity['email']}
            for identity in identities
        ])

    def list_projects(self):
        return [self._with_assignees(project) for project in self.store.find(PROJECTS)]

    def get_project(self, project_id):
        return self._with_assignees(self.get(project_id))

    def get_project_for(self, project_id, caller):
        project = self.get(project_id)
        if caller['id'] not in (project.get('assigned_to') or []) and not is_admin(caller):
            raise Forbidden("Access denied")
        return project

    def create(self, title, description, assigned_to=None, tasks=None, end_date=None, created_by='admin'):
        if not title or not description:
            raise BadRequest("Title and description are required")
        assigned_to = [str(pk) for pk in assigned_to or []]
        with self.store.transaction():
            project = self.store.insert(PROJECTS, new_project(title, description, created_by, end_date, tasks))
            if assigned_to:
                existing = [identity['id'] for identity in self.store.find(IDENTITIES, ids=assigned_to)]
                if len(existing) != len(set(assigned_to)):
                    logger.warning("Some assigned_to ids are invalid: %s", sorted(set(assigned_to) - set(existing)))
                self.store.assign([project['id']], existing)
                logger.info("Assigned project %s to %s students", project['id'], len(existing))
        return self.get(project['id'])

    def update(self, project_id, status=None, feedback=None):
        project = self.get(project_id)
        if status is not None and status not in STATUSES:
            raise BadRequest(f"Invalid status '{status}'")
        changes = {'last_modified': later_than(project['last_modified'])}
        if status:
            changes['status'] = status
        with self.store.transaction():
            self.store.update(PROJECTS, project_id, changes)
            if feedback:
                self.store.push(PROJECTS, project_id, 'feedback', {
                    'comment': feedback, 'from': 'admin', 'date': now(),
                })
        if status and status != project['status']:
            logger.info("Project %s moved from %s to %s", project_id, project['status'], status)
        return self.get(project_id)

    def add_feedback(self, project_id, comment, identity_id=None):
        if not comment:
            raise BadRequest("Feedback content is required")
        project = self.get(project_id)
        entry = {'comment': comment, 'from': 'admin', 'date': now()}
        if identity_id:
            if not self.store.get(IDENTITIES, identity_id):
                raise NotFound("Student not found")
            entry['student_id'] = str(identity_id)
        with self.store.transaction():
            self.store.push(PROJECTS, project_id, 'feedback', entry)
            self.store.update(PROJECTS, project_id, {'last_modified': later_than(project['last_modified'])})
        return self.get(project_id)

    def delete(self, project_id):
        project = self.get(project_id)
        with self.store.transaction():
            if project.get('assigned_to'):
                self.store.unassign([project_id], project['assigned_to'])
            self.store.delete(PROJECTS, project_id)
        logger.info("Deleted project %s", project_id)

    def submit_progress(self, identity_id, project_id, content):
        """
        Record a student's progress on a project.

        Appends a progress update to the student, moves a ``Not Started``
        project to ``In Progress`` and leaves a feedback entry from the
        student on the project.
        """
        if not content:
            raise BadRequest("Progress update content is required")
        identity = self.store.get(IDENTITIES, identity_id)
        if not identity:
            raise NotFound("Student not found")
        project = self.get(project_id)
        if str(identity_id) not in (project.get('assigned_to') or []) and identity.get('role') != 'admin':
            raise Forbidden("Access denied: Not assigned to this project.")

        current = now()
        changes = {'last_modified': later_than(project['last_modified'])}
        if project['status'] == Project.NOT_STARTED:
            changes['status'] = Project.IN_PROGRESS
        with self.store.transaction():
            update, = self.store.push(IDENTITIES, identity_id, 'progress_updates', {
                'content': content,
                'timestamp': current,
                'has_admin_feedback': False,
            })
            self.store.update(PROJECTS, project_id, changes)
            self.store.push(PROJECTS, project_id, 'feedback', {
                'comment': f"Student {identity['name']} submitted progress update: {content}",
                'from': identity['name'],
                'date': current,
            })
        if 'status' in changes:
            logger.info("Project %s started by progress from %s", project_id, identity['username'])
        return update

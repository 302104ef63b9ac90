import logging

from django.contrib.auth.hashers import check_password, make_password

from attendance.qr import check_qr_token, qr_attendance_entry
from portal.dates import as_datetime, now
from portal.exceptions import BadRequest, Conflict, Forbidden, NotFound
from storage import IDENTITIES, PENDING_STUDENTS, PROJECTS

from .models import default_notification_settings, default_security_settings
from .registration import new_identity, public_identity

logger = logging.getLogger(__name__)

PROJECT_SUMMARY_FIELDS = (
    'id', 'title', 'description', 'status', 'tasks', 'feedback', 'start_date', 'end_date', 'last_modified',
)


def is_admin(caller):
    return caller is not None and caller.get('role') == 'admin'


class IdentityService:
    """Operations on login identities: students and admins."""

    def __init__(self, store):
        self.store = store

    def get(self, identity_id):
        identity = self.store.get(IDENTITIES, identity_id)
        if not identity:
            raise NotFound("Student not found")
        return identity

    def _with_projects(self, identity):
        view = public_identity(identity)
        projects = self.store.find(PROJECTS, ids=identity.get('assigned_projects') or [])
        view['assigned_projects'] = [
            {key: project.get(key) for key in PROJECT_SUMMARY_FIELDS} for project in projects
        ]
        return view

    def create(self, name, email, username, password, role='student', **profile):
        for collection in (IDENTITIES, PENDING_STUDENTS):
            if self.store.find_one(collection, {'email': email}, {'username': username}):
                raise Conflict("Email or username is already in use")
        identity = self.store.insert(
            IDENTITIES, new_identity(name, email, username, make_password(password), role=role, **profile),
        )
        logger.info("Created %s identity %s", role, identity['id'])
        return public_identity(identity)

    def list_students(self):
        return [self._with_projects(identity) for identity in self.store.find(IDENTITIES, {'role': 'student'})]

    def get_student(self, identity_id):
        return self._with_projects(self.get(identity_id))

    def profile(self, identity_id, caller):
        if caller['id'] != str(identity_id) and not is_admin(caller):
            raise Forbidden("Access denied")
        return self._with_projects(self.get(identity_id))

    def update_profile(self, identity_id, contact_number=None, bio=None, skills=None):
        identity = self.get(identity_id)
        changes = {}
        if contact_number:
            changes['contact_number'] = contact_number
        if bio:
            changes['bio'] = bio
        if skills:
            changes['attributes'] = dict(identity.get('attributes') or {}, skills=skills)
        if changes:
            self.store.update(IDENTITIES, identity_id, changes)
        identity.update(changes)
        return {
            'name': identity['name'],
            'email': identity['email'],
            'contact_number': identity.get('contact_number'),
            'skills': (identity.get('attributes') or {}).get('skills'),
            'bio': identity.get('bio'),
        }

    def set_reference(self, identity_id, field, reference):
        self.get(identity_id)
        self.store.update(IDENTITIES, identity_id, {field: reference})
        return reference

    def credentials(self, identity_id):
        return {'username': self.get(identity_id)['username']}

    # -- attendance -------------------------------------------------------

    def record_attendance(self, identity_id, status='Present', date=None, time_in=None, time_out=None,
                          notes=None, recorded_by=None):
        self.get(identity_id)
        current = now()
        entry = {
            'date': as_datetime(date) or current,
            'status': status or 'Present',
            'time_in': time_in or current.strftime('%H:%M'),
            'time_out': time_out or None,
            'notes': notes or (f"Marked by admin: {recorded_by}" if recorded_by else None),
        }
        saved, = self.store.push(IDENTITIES, identity_id, 'attendance', entry)
        return saved

    def mark_qr_attendance(self, identity_id, qr_token):
        check_qr_token(qr_token)
        self.get(identity_id)
        saved, = self.store.push(IDENTITIES, identity_id, 'attendance', qr_attendance_entry())
        return saved

    def attendance(self, identity_id, caller):
        if caller['id'] != str(identity_id) and not is_admin(caller):
            raise Forbidden("Access denied. You can only view your own attendance or must be an admin.")
        return self.get(identity_id).get('attendance') or []

    # -- progress updates -------------------------------------------------

    def submit_progress_update(self, identity_id, content):
        if not content:
            raise BadRequest("Progress update content is required")
        identity = self.get(identity_id)
        saved, = self.store.push(IDENTITIES, identity_id, 'progress_updates', {
            'content': content,
            'timestamp': now(),
            'has_admin_feedback': False,
        })
        return dict(saved, student_id=identity['id'], student_name=identity['name'])

    def progress_updates(self, identity_id):
        updates = self.get(identity_id).get('progress_updates') or []
        return sorted(updates, key=lambda update: as_datetime(update['timestamp']), reverse=True)

    def all_progress_updates(self):
        updates = []
        for identity in self.store.find(IDENTITIES, {'role': 'student'}):
            for update in identity.get('progress_updates') or []:
                updates.append(dict(
                    update,
                    student_id=identity['id'],
                    student_name=identity['name'],
                    student_email=identity['email'],
                ))
        return sorted(updates, key=lambda update: as_datetime(update['timestamp']), reverse=True)

    def add_progress_feedback(self, update_id, feedback):
        if not feedback:
            raise BadRequest("Feedback content is required")
        identity, update = self.store.find_entry(IDENTITIES, 'progress_updates', update_id)
        if identity is None:
            raise NotFound("Progress update not found")
        changes = {'feedback': feedback, 'has_admin_feedback': True, 'feedback_date': now()}
        self.store.update_entry(IDENTITIES, identity['id'], 'progress_updates', update['id'], changes)
        return dict(update, **changes)

    # -- admin account ----------------------------------------------------

    def _admin(self, caller):
        if not is_admin(caller):
            raise Forbidden("Access denied. Admin only.")
        admin = self.store.get(IDENTITIES, caller['id'])
        if not admin:
            raise NotFound("Admin profile not found")
        return admin

    def admin_profile(self, caller):
        admin = self._admin(caller)
        return {
            'name': admin['name'],
            'email': admin['email'],
            'username': admin['username'],
            'notification_settings': admin.get('notification_settings') or default_notification_settings(),
            'security_settings': admin.get('security_settings') or default_security_settings(),
            'last_login': admin.get('last_login'),
        }

    def update_admin_profile(self, caller, name=None, email=None, username=None):
        admin = self._admin(caller)
        if email and email != admin['email']:
            if self.store.find_one(IDENTITIES, {'email': email}, exclude_id=admin['id']) or \
                    self.store.find_one(PENDING_STUDENTS, {'email': email}):
                raise Conflict("Email is already in use")
        if username and username != admin['username']:
            if self.store.find_one(IDENTITIES, {'username': username}, exclude_id=admin['id']) or \
                    self.store.find_one(PENDING_STUDENTS, {'username': username}):
                raise Conflict("Username is already in use")
        changes = {
            'name': name or admin['name'],
            'email': email or admin['email'],
            'username': username or admin['username'],
        }
        self.store.update(IDENTITIES, admin['id'], changes)
        return changes

    def change_admin_password(self, caller, current_password, new_password):
        admin = self._admin(caller)
        if not current_password or not new_password:
            raise BadRequest("Current password and new password are required")
        if not check_password(current_password, admin['password']):
            raise BadRequest("Current password is incorrect")
        self.store.update(IDENTITIES, admin['id'], {'password': make_password(new_password)})
        logger.info("Password changed for admin %s", admin['id'])

    def update_settings(self, caller, field, values):
        admin = self._admin(caller)
        defaults = {
            'notification_settings': default_notification_settings,
            'security_settings': default_security_settings,
        }[field]()
        settings = {key: values[key] if values.get(key) is not None else default
                    for key, default in defaults.items()}
        self.store.update(IDENTITIES, admin['id'], {field: settings})
        return settings

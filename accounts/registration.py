"""
Self-service registration with admin approval.

A registration lands in the pending pool. Approving it copies it into the
identity store with the password hash it was submitted with; rejecting it
simply drops it. A username or email lives in at most one of the two pools.
The existence checks below are two separate queries and are not atomic with
the insert; the unique indexes of each pool catch the race inside a pool, a
race across the pools is possible and is accepted.
"""

import logging

from django.contrib.auth.hashers import check_password, make_password
from rest_framework_simplejwt.tokens import AccessToken

from portal.dates import now
from portal.exceptions import BadRequest, Conflict, Forbidden, NotFound, Unauthorized
from storage import IDENTITIES, PENDING_STUDENTS, DuplicateKey

from .models import default_notification_settings, default_security_settings

logger = logging.getLogger(__name__)

PROFILE_KEYS = ('contact_number', 'program', 'university', 'graduation_year', 'bio')


def public_identity(identity):
    """Identity without its password hash."""
    if identity is None:
        return None
    return {key: value for key, value in identity.items() if key != 'password'}


def new_identity(name, email, username, password_hash, role='student', **profile):
    return {
        'name': name,
        'email': email,
        'username': username,
        'password': password_hash,
        'role': role,
        'is_active': True,
        'attributes': profile.pop('attributes', None) or {},
        'notification_settings': profile.pop('notification_settings', None) or default_notification_settings(),
        'security_settings': profile.pop('security_settings', None) or default_security_settings(),
        'assigned_projects': [],
        'attendance': [],
        'progress_updates': [],
        'created_at': now(),
        'last_active': None,
        'last_login': None,
        **profile,
    }


def issue_token(identity):
    token = AccessToken()
    token['user_id'] = identity['id']
    token['role'] = identity.get('role') or 'student'
    token['name'] = identity.get('name')
    return str(token)


class RegistrationService:

    def __init__(self, store):
        self.store = store

    def _credentials_in_use(self, email, username):
        existing = self.store.find_one(IDENTITIES, {'email': email}, {'username': username})
        if existing:
            logger.warning("Registration rejected: email or username already used by an active account")
            raise Conflict("Email or username is already in use by an active student account.")
        pending = self.store.find_one(PENDING_STUDENTS, {'email': email}, {'username': username})
        if pending:
            logger.warning("Registration rejected: a pending request already uses this email or username")
            raise Conflict("A registration request is already pending for this email or username.")

    def register(self, name, email, username, password, **profile):
        if not name or not email or not username or not password:
            raise BadRequest("Name, email, username, and password are required.")
        self._credentials_in_use(email, username)

        record = {
            'name': name,
            'email': email,
            'username': username,
            'password': make_password(password),
            'attributes': profile.pop('attributes', None) or {},
            'notification_settings': default_notification_settings(),
            'security_settings': default_security_settings(),
            'created_at': now(),
        }
        record.update({key: profile.get(key) for key in PROFILE_KEYS})
        try:
            pending = self.store.insert(PENDING_STUDENTS, record)
        except DuplicateKey as exc:
            raise Conflict("A registration request is already pending for this email or username.") from exc
        logger.info("Pending registration %s created for %s", pending['id'], username)
        return public_identity(pending)

    def list_pending(self):
        return [public_identity(pending) for pending in self.store.find(PENDING_STUDENTS)]

    def approve(self, pending_id):
        pending = self.store.get(PENDING_STUDENTS, pending_id)
        if not pending:
            raise NotFound("Pending registration not found")

        profile = {key: pending.get(key) for key in PROFILE_KEYS}
        record = new_identity(
            pending['name'], pending['email'], pending['username'], pending['password'],
            attributes=pending.get('attributes'),
            notification_settings=pending.get('notification_settings'),
            security_settings=pending.get('security_settings'),
            **profile,
        )
        with self.store.transaction():
            try:
                identity = self.store.insert(IDENTITIES, record)
            except DuplicateKey:
                # An earlier approval may have stopped after creating the identity
                identity = self.store.find_one(
                    IDENTITIES, {'username': pending['username'], 'email': pending['email']},
                )
                if identity is None:
                    raise Conflict("Email or username is already in use by an active student account.")
                logger.info("Pending registration %s was already approved as %s", pending_id, identity['id'])
            self.store.delete(PENDING_STUDENTS, pending_id)
        logger.info("Approved registration %s as identity %s", pending_id, identity['id'])
        return public_identity(identity)

    def reject(self, pending_id):
        if not self.store.delete(PENDING_STUDENTS, pending_id):
            raise NotFound("Pending registration not found")
        logger.info("Rejected registration %s", pending_id)

    def login(self, identifier, password):
        if not password:
            raise BadRequest("Password is required.")
        if not identifier:
            raise BadRequest("Username or email is required.")

        criteria = ({'username': identifier}, {'email': identifier})
        if self.store.find_one(PENDING_STUDENTS, *criteria):
            logger.info("Login blocked: registration for %s is pending approval", identifier)
            raise Forbidden("Your registration is pending admin approval. You cannot log in yet.")

        identity = self.store.find_one(IDENTITIES, *criteria)
        if not identity or not identity.get('is_active', True):
            logger.warning("Login failed: no active account for %s", identifier)
            raise Unauthorized("Invalid credentials or account not found.")
        if not check_password(password, identity['password']):
            logger.warning("Login failed: password mismatch for %s", identifier)
            raise Unauthorized("Invalid credentials.")

        current = now()
        self.store.update(IDENTITIES, identity['id'], {'last_active': current, 'last_login': current})
        logger.info("Login successful for %s", identity['username'])
        return {
            'token': issue_token(identity),
            'student_id': identity['id'],
            'name': identity['name'],
            'role': identity.get('role') or 'student',
        }

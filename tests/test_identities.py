import pytest
from django.contrib.auth.hashers import check_password

from accounts.identities import IdentityService
from accounts.registration import RegistrationService
from portal.dates import as_datetime
from portal.exceptions import BadRequest, Conflict, Forbidden, NotFound
from projects.services import ProjectService
from storage import IDENTITIES

from tests.conftest import QR_TOKEN, make_identity


@pytest.fixture
def identities(store):
    return IdentityService(store)


def test_student_listing_hides_passwords_and_expands_projects(identities, store, student, admin):
    ProjectService(store).create('T1', 'first', assigned_to=[student['id']])

    listed, = identities.list_students()

    assert listed['username'] == 'alice'
    assert 'password' not in listed
    assert [project['title'] for project in listed['assigned_projects']] == ['T1']


def test_profile_is_visible_to_self_and_admins(identities, student, student_caller, admin_caller, store):
    other = make_identity(store, 'bob')

    assert identities.profile(student['id'], student_caller)['username'] == 'alice'
    assert identities.profile(student['id'], admin_caller)['username'] == 'alice'
    with pytest.raises(Forbidden):
        identities.profile(student['id'], {'id': other['id'], 'role': 'student'})
    with pytest.raises(NotFound):
        identities.profile('999999', admin_caller)


def test_update_profile_stores_skills_under_attributes(identities, student, store):
    result = identities.update_profile(student['id'], contact_number='+4412', skills=['python', 'sql'])

    assert result['skills'] == ['python', 'sql']
    stored = store.get(IDENTITIES, student['id'])
    assert stored['attributes']['skills'] == ['python', 'sql']
    assert stored['contact_number'] == '+4412'


def test_create_admin_identity_conflicts_on_reuse(identities):
    admin = identities.create('Root', 'root@example.com', 'root', 'pw', role='admin')
    assert admin['role'] == 'admin'
    with pytest.raises(Conflict):
        identities.create('Root', 'root@example.com', 'root2', 'pw', role='admin')


def test_create_refuses_credentials_held_by_a_pending_registration(identities, store):
    RegistrationService(store).register(name='Carol', email='carol@example.com', username='carol', password='x')

    with pytest.raises(Conflict):
        identities.create('Carol', 'other@example.com', 'carol', 'pw')
    with pytest.raises(Conflict):
        identities.create('Carol', 'carol@example.com', 'carol2', 'pw')
    assert store.find_one(IDENTITIES, {'email': 'carol@example.com'}, {'username': 'carol'}) is None


def test_admin_recorded_and_qr_attendance(identities, student, student_caller):
    identities.record_attendance(student['id'], status='Absent', date='2024-05-01', recorded_by='Portal Admin')
    with pytest.raises(BadRequest):
        identities.mark_qr_attendance(student['id'], 'nope')
    identities.mark_qr_attendance(student['id'], QR_TOKEN)

    entries = identities.attendance(student['id'], student_caller)

    assert [entry['status'] for entry in entries] == ['Absent', 'Present']
    assert entries[0]['notes'] == 'Marked by admin: Portal Admin'
    assert as_datetime(entries[0]['date']) == as_datetime('2024-05-01')


def test_attendance_of_someone_else_is_forbidden(identities, student, store):
    other = make_identity(store, 'bob')
    with pytest.raises(Forbidden):
        identities.attendance(student['id'], {'id': other['id'], 'role': 'student'})


def test_progress_updates_and_admin_feedback(identities, student):
    first = identities.submit_progress_update(student['id'], 'first')
    second = identities.submit_progress_update(student['id'], 'second')

    mine = identities.progress_updates(student['id'])
    timestamps = [as_datetime(update['timestamp']) for update in mine]
    assert timestamps == sorted(timestamps, reverse=True)
    assert {update['id'] for update in mine} == {first['id'], second['id']}

    updated = identities.add_progress_feedback(first['id'], 'keep going')
    assert updated['has_admin_feedback'] is True

    everything = identities.all_progress_updates()
    reviewed = next(update for update in everything if update['id'] == first['id'])
    assert reviewed['feedback'] == 'keep going'
    assert reviewed['feedback_date'] is not None
    assert reviewed['student_name'] == 'Alice'

    with pytest.raises(NotFound):
        identities.add_progress_feedback('999999', 'lost')
    with pytest.raises(BadRequest):
        identities.submit_progress_update(student['id'], '')


def test_admin_profile_and_uniqueness(identities, admin_caller, student_caller, student):
    with pytest.raises(Forbidden):
        identities.admin_profile(student_caller)
    with pytest.raises(Conflict):
        identities.update_admin_profile(admin_caller, email=student['email'])
    with pytest.raises(Conflict):
        identities.update_admin_profile(admin_caller, username='alice')

    changed = identities.update_admin_profile(admin_caller, name='Head Admin')

    assert changed == {'name': 'Head Admin', 'email': 'admin@example.com', 'username': 'admin'}
    assert identities.admin_profile(admin_caller)['name'] == 'Head Admin'


def test_admin_profile_cannot_take_pending_credentials(identities, admin_caller, store):
    RegistrationService(store).register(name='Carol', email='carol@example.com', username='carol', password='x')

    with pytest.raises(Conflict):
        identities.update_admin_profile(admin_caller, username='carol')
    with pytest.raises(Conflict):
        identities.update_admin_profile(admin_caller, email='carol@example.com')
    assert identities.admin_profile(admin_caller)['username'] == 'admin'


def test_admin_password_change(identities, admin_caller, store):
    with pytest.raises(BadRequest):
        identities.change_admin_password(admin_caller, 'wrong', 'new-secret')

    identities.change_admin_password(admin_caller, 'secret123', 'new-secret')

    assert check_password('new-secret', store.get(IDENTITIES, admin_caller['id'])['password'])


def test_settings_fill_omitted_keys_with_defaults(identities, admin_caller):
    saved = identities.update_settings(admin_caller, 'security_settings', {'session_timeout': 60})

    assert saved == {'two_factor_auth': False, 'require_password_reset': False, 'session_timeout': 60}
    assert identities.admin_profile(admin_caller)['security_settings'] == saved

    notifications = identities.update_settings(admin_caller, 'notification_settings', {'system_alerts': False})
    assert notifications['system_alerts'] is False
    assert notifications['email_notifications'] is True

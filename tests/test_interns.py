import pytest
from django.contrib.auth.hashers import check_password

from accounts.registration import RegistrationService
from attendance.merge import NOT_AVAILABLE
from interns.lifecycle import InternLifecycle
from portal.dates import as_datetime, now
from portal.exceptions import BadRequest, Conflict, NotFound
from projects.models import Project
from projects.services import ProjectService
from storage import IDENTITIES, INTERNS, PAST_INTERNS, PROJECTS

from tests.conftest import QR_TOKEN, make_identity


@pytest.fixture
def lifecycle(store):
    return InternLifecycle(store, archive_deletes_projects=False)


def hire(lifecycle, name='Bob', username='bob', password='pw', tasks='Research, Prototype', **extra):
    return lifecycle.create(
        name=name, email=f'{username}@example.com', username=username, password=password, tasks=tasks, **extra,
    )


def test_create_with_credentials_makes_identity_and_one_project_per_task(lifecycle, store):
    result = hire(lifecycle)

    account = result['student_account']
    identity = store.get(IDENTITIES, account['id'])
    assert account['username'] == 'bob'
    assert identity['role'] == 'student'
    titles = [project['title'] for project in store.find(PROJECTS, ids=identity['assigned_projects'])]
    assert titles == ['Research', 'Prototype']
    for project in store.find(PROJECTS):
        assert project['status'] == Project.NOT_STARTED
        assert project['assigned_to'] == [identity['id']]
    assert result['intern']['tasks'] == ['Research', 'Prototype']
    assert result['intern']['student']['username'] == 'bob'


def test_create_without_credentials_has_no_identity_or_projects(lifecycle, store):
    result = lifecycle.create(name='Solo', email='solo@example.com', tasks=['One'])

    assert result['student_account'] is None
    assert result['intern']['student'] == NOT_AVAILABLE
    assert result['intern']['university'] == NOT_AVAILABLE
    assert store.find(PROJECTS) == []


def test_create_links_existing_identity(lifecycle, store):
    carl = make_identity(store, 'carl')

    result = lifecycle.create(name='Carl', email='carl@example.com', identity_id=carl['id'], tasks='Intro')

    assert result['intern']['student']['id'] == carl['id']
    assert len(store.get(IDENTITIES, carl['id'])['assigned_projects']) == 1
    with pytest.raises(Conflict):
        lifecycle.create(name='Carl', email='carl@example.com', identity_id=carl['id'])


def test_create_rejects_taken_username(lifecycle, store):
    make_identity(store, 'bob')
    with pytest.raises(Conflict):
        hire(lifecycle)
    assert store.find(INTERNS) == []


def test_create_rejects_pending_email(lifecycle, store):
    RegistrationService(store).register(name='Bob', email='bob@example.com', username='bobby', password='x')
    with pytest.raises(Conflict):
        hire(lifecycle)


def test_same_task_list_twice_creates_no_new_projects(lifecycle, store):
    intern = hire(lifecycle, tasks='A, B')['intern']

    lifecycle.update(intern['id'], tasks='A, B, C')
    after_first = len(store.find(PROJECTS))
    lifecycle.update(intern['id'], tasks='A, B, C')

    assert after_first == 3
    assert len(store.find(PROJECTS)) == after_first


def test_dropped_tasks_keep_their_projects(lifecycle, store):
    intern = hire(lifecycle, tasks='A, B')['intern']

    updated = lifecycle.update(intern['id'], tasks=['B'], name='Robert')

    assert updated['tasks'] == ['B']
    assert len(store.find(PROJECTS)) == 2
    assert store.get(INTERNS, intern['id'])['name'] == 'Robert'


def test_view_merges_admin_and_student_entries(lifecycle, store):
    result = hire(lifecycle)
    intern_id = result['intern']['id']
    identity_id = result['student_account']['id']
    lifecycle.record_attendance(intern_id, 'Present', date='2024-01-01')
    store.push(IDENTITIES, identity_id, 'attendance', {
        'date': as_datetime('2024-01-03'), 'status': 'Late', 'time_in': '09:40',
    })

    view = lifecycle.get_intern(intern_id)

    assert [as_datetime(entry['date']) for entry in view['attendance']] == \
        [as_datetime('2024-01-03'), as_datetime('2024-01-01')]
    assert view['attendance'][1]['time_in'] == NOT_AVAILABLE
    assert view['attendance'][0]['time_in'] == '09:40'
    assert view['attendance'][0]['notes'] == NOT_AVAILABLE


def test_list_interns_resolves_identities(lifecycle):
    hire(lifecycle)
    lifecycle.create(name='Solo', email='solo@example.com')

    views = lifecycle.list_interns()

    assert [view['name'] for view in views] == ['Bob', 'Solo']
    assert views[0]['student']['username'] == 'bob'
    assert views[1]['student'] == NOT_AVAILABLE


def test_record_progress_recomputes_completion(lifecycle, store):
    intern = hire(lifecycle, tasks='A, B, C')['intern']

    first = lifecycle.record_progress(intern['id'], 'day one')
    second = lifecycle.record_progress(intern['id'], 'day two')

    assert first['progress'] == 33
    assert second['progress'] == 67
    for _ in range(3):
        last = lifecycle.record_progress(intern['id'], 'more')
    assert last['progress'] == 100
    assert len(lifecycle.get_intern(intern['id'])['daily_progress']) == 5


def test_qr_attendance_needs_the_configured_token(lifecycle):
    intern = hire(lifecycle)['intern']
    with pytest.raises(BadRequest):
        lifecycle.mark_qr_attendance(intern['id'], 'wrong')

    entry = lifecycle.mark_qr_attendance(intern['id'], QR_TOKEN)

    assert entry['status'] == 'Present'
    assert lifecycle.get_intern(intern['id'])['attendance'][0]['notes'] == 'Attendance marked via QR code'


def test_credential_rotation_to_taken_username_mutates_nothing(lifecycle, store):
    make_identity(store, 'alice')
    intern = hire(lifecycle, username='bob', password='old-pass')['intern']
    bob_before = store.get(IDENTITIES, intern['student']['id'])
    intern_before = store.get(INTERNS, intern['id'])

    with pytest.raises(Conflict):
        lifecycle.update_credentials(intern['id'], username='alice', password='new-pass')

    bob_after = store.get(IDENTITIES, intern['student']['id'])
    assert bob_after['username'] == 'bob'
    assert bob_after['password'] == bob_before['password']
    assert store.get(INTERNS, intern['id']) == intern_before
    assert store.find_one(IDENTITIES, {'username': 'alice'})['email'] == 'alice@example.com'


def test_credential_rotation_to_pending_username_is_refused(lifecycle, store):
    registrations = RegistrationService(store)
    pending = registrations.register(name='Carol', email='carol@example.com', username='carol', password='x')
    intern = hire(lifecycle)['intern']

    with pytest.raises(Conflict):
        lifecycle.update_credentials(intern['id'], username='carol', password='new-pass')

    assert store.get(IDENTITIES, intern['student']['id'])['username'] == 'bob'
    approved = registrations.approve(pending['id'])
    assert approved['username'] == 'carol'


def test_create_rejects_pending_username(lifecycle, store):
    RegistrationService(store).register(name='Carol', email='carol@example.com', username='bob', password='x')
    with pytest.raises(Conflict):
        hire(lifecycle)
    assert store.find(INTERNS) == []


def test_create_requires_username_and_password_together(lifecycle, store):
    with pytest.raises(BadRequest):
        lifecycle.create(name='Bob', email='bob@example.com', username='bob')
    with pytest.raises(BadRequest):
        lifecycle.create(name='Bob', email='bob@example.com', password='pw')
    assert store.find(INTERNS) == []
    assert store.find_one(IDENTITIES, {'username': 'bob'}) is None


def test_repeated_task_names_create_one_project_each(lifecycle, store):
    intern = hire(lifecycle, tasks='A')['intern']

    updated = lifecycle.update(intern['id'], tasks='A, B, B')

    assert updated['tasks'] == ['A', 'B']
    assert sorted(project['title'] for project in store.find(PROJECTS)) == ['A', 'B']


def test_credential_rotation(lifecycle, store):
    intern = hire(lifecycle)['intern']

    lifecycle.update_credentials(intern['id'], username='robert', password='fresh')

    identity = store.get(IDENTITIES, intern['student']['id'])
    assert identity['username'] == 'robert'
    assert check_password('fresh', identity['password'])


def test_credential_rotation_without_identity(lifecycle):
    intern = lifecycle.create(name='Solo', email='solo@example.com')['intern']
    with pytest.raises(BadRequest):
        lifecycle.update_credentials(intern['id'], username='solo')


def test_archive_snapshots_and_unassigns(lifecycle, store):
    result = hire(lifecycle, tasks='Build, Ship')
    intern_id = result['intern']['id']
    identity_id = result['student_account']['id']
    build, ship = store.find(PROJECTS)
    projects = ProjectService(store)
    projects.update(build['id'], status=Project.COMPLETED)
    projects.update(ship['id'], status=Project.IN_PROGRESS)
    lifecycle.record_attendance(intern_id, 'Present')

    past = lifecycle.archive(intern_id)

    assert store.get(INTERNS, intern_id) is None
    assert store.get(IDENTITIES, identity_id)['is_active'] is False
    assert store.get(IDENTITIES, identity_id)['assigned_projects'] == []
    assert len(store.find(PROJECTS)) == 2
    snapshot = store.get(PAST_INTERNS, past['id'])
    assert snapshot['source_intern_id'] == intern_id
    assert sorted(project['status'] for project in snapshot['deleted_projects']) == \
        [Project.COMPLETED, Project.IN_PROGRESS]

    # later activity elsewhere leaves the snapshot alone
    hire(lifecycle, name='Dana', username='dana', tasks='Other')
    projects.create('Extra', 'unrelated')
    assert store.get(PAST_INTERNS, past['id'])['deleted_projects'] == snapshot['deleted_projects']


def test_archive_can_delete_projects(store):
    lifecycle = InternLifecycle(store, archive_deletes_projects=True)
    intern = hire(lifecycle, tasks='Build, Ship')['intern']

    lifecycle.archive(intern['id'])

    assert store.find(PROJECTS) == []


def test_archive_is_idempotent(lifecycle, store):
    intern = hire(lifecycle)['intern']

    first = lifecycle.archive(intern['id'])
    second = lifecycle.archive(intern['id'])

    assert first['id'] == second['id']
    assert len(store.find(PAST_INTERNS)) == 1


def test_archive_resumes_after_partial_failure(lifecycle, store):
    intern = hire(lifecycle)['intern']
    snapshot = store.insert(PAST_INTERNS, {
        'name': 'Bob', 'email': 'bob@example.com', 'joining_date': now(), 'deleted_at': now(),
        'source_intern_id': intern['id'], 'attendance': [], 'daily_progress': [], 'deleted_projects': [],
    })

    past = lifecycle.archive(intern['id'])

    assert past['id'] == snapshot['id']
    assert len(store.find(PAST_INTERNS)) == 1
    assert store.get(INTERNS, intern['id']) is None


def test_archive_unknown_intern(lifecycle):
    with pytest.raises(NotFound):
        lifecycle.archive('999999')


def test_past_intern_details(lifecycle, store):
    result = hire(lifecycle, tasks='Build, Ship')
    intern_id = result['intern']['id']
    build = store.find(PROJECTS)[0]
    ProjectService(store).update(build['id'], status=Project.COMPLETED)
    lifecycle.record_attendance(intern_id, 'Present')
    lifecycle.record_attendance(intern_id, 'Late')
    past = lifecycle.archive(intern_id)

    details = lifecycle.get_past(past['id'])

    assert details['stats']['completed_projects'] == 1
    assert details['stats']['total_projects'] == 2
    assert details['stats']['attendance'] == {'present': 1, 'absent': 0, 'late': 1, 'total': 2}
    assert details['student']['username'] == 'bob'
    assert 'password' not in details['student']
    assert [item['id'] for item in lifecycle.list_past()] == [past['id']]

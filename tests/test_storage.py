import pytest

from portal.dates import now
from projects.services import new_project
from storage import IDENTITIES, INTERNS, PAST_INTERNS, PENDING_STUDENTS, PROJECTS, DuplicateKey, UnknownField

from tests.conftest import make_identity


def test_insert_and_get_round_trip_with_string_ids(store):
    identity = make_identity(store, 'carol', contact_number='+100')

    fetched = store.get(IDENTITIES, identity['id'])

    assert isinstance(fetched['id'], str)
    assert fetched['username'] == 'carol'
    assert fetched['contact_number'] == '+100'
    assert fetched['assigned_projects'] == []
    assert fetched['attendance'] == []


def test_get_with_malformed_id_returns_none(store):
    assert store.get(IDENTITIES, 'not-an-id') is None
    assert store.get(PROJECTS, None) is None


def test_unique_username_and_email(store):
    make_identity(store, 'dave')
    with pytest.raises(DuplicateKey):
        make_identity(store, 'dave', email='other@example.com')
    with pytest.raises(DuplicateKey):
        make_identity(store, 'dave2', email='dave@example.com')


def test_find_one_ors_criteria_and_honours_exclusion(store):
    erin = make_identity(store, 'erin')
    make_identity(store, 'frank')

    assert store.find_one(IDENTITIES, {'username': 'nobody'}, {'email': 'erin@example.com'})['id'] == erin['id']
    assert store.find_one(IDENTITIES, {'username': 'erin'}, exclude_id=erin['id']) is None


def test_find_filters_by_criteria_and_ids(store):
    make_identity(store, 'gina')
    boss = make_identity(store, 'boss', role='admin')
    hank = make_identity(store, 'hank')

    students = store.find(IDENTITIES, {'role': 'student'})
    assert [identity['username'] for identity in students] == ['gina', 'hank']
    assert [identity['id'] for identity in store.find(IDENTITIES, ids=[hank['id'], boss['id']])] == \
        [boss['id'], hank['id']]


def test_update_only_accepts_scalar_fields(store):
    identity = make_identity(store, 'ivy')

    assert store.update(IDENTITIES, identity['id'], {'bio': 'hello', 'is_active': False})
    with pytest.raises(UnknownField):
        store.update(IDENTITIES, identity['id'], {'attendance': []})

    fetched = store.get(IDENTITIES, identity['id'])
    assert fetched['bio'] == 'hello'
    assert fetched['is_active'] is False


def test_update_to_taken_username_raises_duplicate(store):
    make_identity(store, 'jack')
    kate = make_identity(store, 'kate')
    with pytest.raises(DuplicateKey):
        store.update(IDENTITIES, kate['id'], {'username': 'jack'})


def test_push_assigns_entry_ids_and_entries_can_be_updated(store):
    identity = make_identity(store, 'liam')

    saved, = store.push(IDENTITIES, identity['id'], 'progress_updates', {
        'content': 'first', 'timestamp': now(), 'has_admin_feedback': False,
    })
    owner, entry = store.find_entry(IDENTITIES, 'progress_updates', saved['id'])
    assert owner['id'] == identity['id']
    assert entry['content'] == 'first'

    assert store.update_entry(IDENTITIES, identity['id'], 'progress_updates', saved['id'],
                              {'feedback': 'nice', 'has_admin_feedback': True})
    updated = store.get(IDENTITIES, identity['id'])['progress_updates'][0]
    assert updated['id'] == saved['id']
    assert updated['feedback'] == 'nice'
    assert updated['has_admin_feedback'] is True


def test_find_entry_of_unknown_entry(store):
    assert store.find_entry(IDENTITIES, 'progress_updates', 'missing') == (None, None)


def test_push_to_missing_record_returns_none(store):
    project = store.insert(PROJECTS, new_project('P', 'd'))
    store.delete(PROJECTS, project['id'])
    assert store.push(PROJECTS, project['id'], 'feedback', {'comment': 'x', 'from': 'admin', 'date': now()}) is None


def test_assign_is_a_set_union_on_both_sides(store):
    identity = make_identity(store, 'mia')
    first = store.insert(PROJECTS, new_project('One', 'first'))
    second = store.insert(PROJECTS, new_project('Two', 'second'))

    store.assign([first['id'], second['id']], [identity['id']])
    store.assign([first['id']], [identity['id']])

    assert store.get(IDENTITIES, identity['id'])['assigned_projects'] == [first['id'], second['id']]
    assert store.get(PROJECTS, first['id'])['assigned_to'] == [identity['id']]

    store.unassign([first['id']], [identity['id']])
    assert store.get(IDENTITIES, identity['id'])['assigned_projects'] == [second['id']]
    assert store.get(PROJECTS, first['id'])['assigned_to'] == []


def test_project_embedded_lists(store):
    project = store.insert(PROJECTS, new_project('Tasks', 'with tasks', tasks=[{'description': 'write'}]))
    store.push(PROJECTS, project['id'], 'feedback', {'comment': 'ok', 'from': 'admin', 'date': now()})

    fetched = store.get(PROJECTS, project['id'])

    assert fetched['tasks'][0]['description'] == 'write'
    assert fetched['tasks'][0]['is_complete'] is False
    assert fetched['feedback'][0]['from'] == 'admin'
    assert fetched['feedback'][0]['id']


def test_intern_identity_link_is_a_string(store):
    identity = make_identity(store, 'noah')
    intern = store.insert(INTERNS, {
        'name': 'Noah', 'email': 'noah@example.com', 'identity_id': identity['id'],
        'joining_date': now(), 'tasks': ['a'], 'attendance': [], 'daily_progress': [],
    })
    assert store.get(INTERNS, intern['id'])['identity_id'] == identity['id']
    assert store.find_one(INTERNS, {'identity_id': identity['id']})['id'] == intern['id']


def test_past_intern_is_unique_per_source(store):
    record = {'name': 'Old', 'email': 'old@example.com', 'joining_date': now(), 'deleted_at': now(),
              'source_intern_id': '42', 'attendance': [], 'daily_progress': [], 'deleted_projects': []}
    store.insert(PAST_INTERNS, record)
    with pytest.raises(DuplicateKey):
        store.insert(PAST_INTERNS, dict(record))


def test_delete_reports_whether_anything_was_removed(store):
    pending = store.insert(PENDING_STUDENTS, {
        'name': 'P', 'email': 'p@example.com', 'username': 'p', 'password': 'x', 'created_at': now(),
    })
    assert store.delete(PENDING_STUDENTS, pending['id']) is True
    assert store.delete(PENDING_STUDENTS, pending['id']) is False

import pytest
from sqlalchemy.exc import OperationalError

from portal_backend.models.user import User
from portal_backend.repositories.content import CompetitionStore

ADMIN_MUTATIONS = [
    ('POST', '/api/competitions', {'name': 'Cup'}),
    ('DELETE', '/api/competitions/1', None),
    ('POST', '/api/carousel/insights', {'title': 'Card'}),
    ('PUT', '/api/carousel/insights/1', {'title': 'Card'}),
    ('DELETE', '/api/carousel/insights/1', None),
]


@pytest.mark.parametrize(('method', 'path', 'body'), ADMIN_MUTATIONS)
def test_anonymous_callers_get_401_not_403(client, method, path, body) -> None:
    response = client.request(method, path, json=body)

    assert response.status_code == 401


@pytest.mark.parametrize(('method', 'path', 'body'), ADMIN_MUTATIONS)
def test_non_admin_sessions_are_forbidden(user_client, method, path, body) -> None:
    response = user_client.request(method, path, json=body)

    assert response.status_code == 403
    assert response.json() == {'success': False, 'message': 'Admin access required'}


def test_public_lists_need_no_session(client) -> None:
    assert client.get('/api/competitions').json() == {'success': True, 'data': []}
    assert client.get('/api/carousel/insights').json() == {'success': True, 'data': []}


def test_admin_competition_crud(admin_client, client) -> None:
    response = admin_client.post('/api/competitions', json={'name': 'Champions Cup', 'icon': 'cup.png'})
    assert response.status_code == 200
    competition_id = response.json()['id']

    duplicate = admin_client.post('/api/competitions', json={'name': 'Champions Cup'})
    assert duplicate.status_code == 400

    listed = client.get('/api/competitions').json()['data']
    assert [row['name'] for row in listed] == ['Champions Cup']

    assert admin_client.delete(f'/api/competitions/{competition_id}').json() == {'success': True}
    assert admin_client.delete(f'/api/competitions/{competition_id}').status_code == 404
    assert client.get('/api/competitions').json()['data'] == []


def test_create_competition_without_name_is_400(admin_client) -> None:
    assert admin_client.post('/api/competitions', json={'icon': 'x.png'}).status_code == 400


def test_admin_carousel_crud_with_competition_join(admin_client, client) -> None:
    competition_id = admin_client.post(
        '/api/competitions',
        json={'name': 'Premier', 'icon': 'premier.png'},
    ).json()['id']

    response = admin_client.post('/api/carousel/insights', json={
        'title': 'Weekend preview',
        'date': '2025-05-01',
        'subtitle': 'Big games',
        'parents': [
            {'title': 'Matches', 'dropdowns': [{'title': 'Derby', 'competition_id': competition_id}]},
        ],
    })
    assert response.status_code == 200
    card_id = response.json()['id']

    card = client.get('/api/carousel/insights').json()['data'][0]
    dropdown = card['parents'][0]['dropdowns'][0]
    assert card['id'] == card_id
    assert dropdown['competition_name'] == 'Premier'
    assert dropdown['competition_icon'] == 'premier.png'

    response = admin_client.put(f'/api/carousel/insights/{card_id}', json={'title': 'Updated'})
    assert response.json() == {'success': True, 'id': card_id}
    updated = client.get(f'/api/carousel/insights/{card_id}').json()['data']
    assert updated['title'] == 'Updated'
    assert updated['subtitle'] is None
    assert updated['parents'] == []

    assert admin_client.delete(f'/api/carousel/insights/{card_id}').json() == {'success': True}
    assert client.get(f'/api/carousel/insights/{card_id}').status_code == 404


def test_carousel_validation_and_missing_cards(admin_client) -> None:
    assert admin_client.post('/api/carousel/insights', json={'subtitle': 'no title'}).status_code == 400
    assert admin_client.put('/api/carousel/insights/999', json={'title': 'x'}).status_code == 404
    assert admin_client.delete('/api/carousel/insights/999').status_code == 404


def test_revoked_admin_loses_access_on_next_call(admin_client, db) -> None:
    admin = db.query(User).filter(User.email == 'admin@example.com').one()
    admin.role = 'user'
    db.commit()

    response = admin_client.post('/api/competitions', json={'name': 'Cup'})

    assert response.status_code == 403
    assert admin_client.get('/api/session').json()['user']['role'] == 'user'


def test_overlong_content_fields_are_400(admin_client, client) -> None:
    assert admin_client.post('/api/competitions', json={'name': 'C' * 256}).status_code == 400
    assert admin_client.post('/api/carousel/insights', json={'title': 'Card', 'date': 'd' * 65}).status_code == 400

    assert client.get('/api/competitions').json()['data'] == []
    assert client.get('/api/carousel/insights').json()['data'] == []


def test_store_failure_renders_as_internal_error(client, monkeypatch) -> None:
    def broken_list(self):
        raise OperationalError('SELECT competitions', {}, Exception('connection lost'))

    monkeypatch.setattr(CompetitionStore, 'list', broken_list)

    response = client.get('/api/competitions')

    assert response.status_code == 500
    assert response.json() == {'success': False, 'message': 'Internal server error'}

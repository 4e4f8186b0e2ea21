# petadopt/api/users/test_user_services.py
"""
사용자 프로필 서비스 테스트

사용법: python -m pytest petadopt/api/users -v
"""


def test_get_user_profile(user_service, seed_users):
    profile = user_service.get_user_profile('user-b')
    assert profile == {'user_id': 'user-b', 'display_name': '비', 'photo_url': None, 'bio': None, 'city': '부산'}
    assert user_service.get_user_profile('missing') is None


def test_get_profiles_skips_missing_users(user_service, seed_users):
    profiles = user_service.get_profiles(['user-b', 'missing', 'user-b', 'user-c'])
    assert set(profiles) == {'user-b', 'user-c'}


def test_upsert_creates_then_updates(db, user_service):
    """문서가 없으면 새로 만들고, 있으면 전달된 필드만 수정한다"""
    created = user_service.upsert_profile('new-user', {'display_name': '새싹', 'city': '광주'})
    assert created['display_name'] == '새싹'
    assert 'created_at' in db.docs('users')['new-user']

    updated = user_service.upsert_profile('new-user', {'bio': '고양이 두 마리와 살아요'})
    assert updated['display_name'] == '새싹'
    assert updated['bio'] == '고양이 두 마리와 살아요'


def test_profile_routes(client, auth_headers, seed_users):
    response = client.put('/api/users/me', json={'city': '제주'}, headers=auth_headers('user-b'))
    assert response.status_code == 200
    assert response.get_json()['city'] == '제주'

    fetched = client.get('/api/users/user-b')
    assert fetched.get_json()['city'] == '제주'

    assert client.put('/api/users/me', json={}, headers=auth_headers('user-b')).status_code == 400
    assert client.get('/api/users/missing').status_code == 404

# petadopt/api/pets/test_pet_services.py
"""
반려동물 서비스 및 라우트 테스트

사용법: python -m pytest petadopt/api/pets -v
"""

import pytest

from petadopt.models.pet import PET_PLACEHOLDER_IMAGE


def test_add_pet_defaults(pet_service):
    pet = pet_service.add_pet('owner-a', {'name': '초코', 'species': 'Dog'})

    assert pet.owner_id == 'owner-a'
    assert pet.image_url == PET_PLACEHOLDER_IMAGE
    assert pet.waiting_for_adoption is False
    assert pet.version == 0
    assert pet_service.get_pet(pet.pet_id) == pet


def test_get_pet_profile_missing(pet_service):
    assert pet_service.get_pet('missing') is None
    with pytest.raises(FileNotFoundError):
        pet_service.get_pet_profile('missing')


def test_adoption_listings_only_include_waiting_pets(pet_service):
    listed = pet_service.add_pet('owner-a', {'name': '초코', 'species': 'Dog', 'waiting_for_adoption': True})
    pet_service.add_pet('owner-a', {'name': '보리', 'species': 'Cat'})

    assert [p.pet_id for p in pet_service.get_pets_waiting_for_adoption()] == [listed.pet_id]
    assert len(pet_service.get_pets_by_owner('owner-a')) == 2
    assert pet_service.get_pets_by_owner('user-b') == []


def test_update_pet_profile_owner_only(pet_service):
    pet = pet_service.add_pet('owner-a', {'name': '초코', 'species': 'Dog'})

    updated = pet_service.update_pet_profile(pet.pet_id, 'owner-a', {'name': '초코칩', 'age': 4})
    assert updated.name == '초코칩'
    assert updated.age == 4

    with pytest.raises(PermissionError):
        pet_service.update_pet_profile(pet.pet_id, 'user-b', {'name': '가로채기'})


def test_update_pet_profile_rejects_ownership_fields(db, pet_service):
    """소유자와 version은 프로필 수정으로 바꿀 수 없다"""
    pet = pet_service.add_pet('owner-a', {'name': '초코', 'species': 'Dog'})

    with pytest.raises(ValueError):
        pet_service.update_pet_profile(pet.pet_id, 'owner-a', {'owner_id': 'user-b'})
    with pytest.raises(ValueError):
        pet_service.update_pet_profile(pet.pet_id, 'owner-a', {})
    assert db.docs('pets')[pet.pet_id]['owner_id'] == 'owner-a'


def test_set_adoption_listing(pet_service):
    pet = pet_service.add_pet('owner-a', {'name': '초코', 'species': 'Dog'})

    assert pet_service.set_adoption_listing(pet.pet_id, 'owner-a', True).waiting_for_adoption is True
    with pytest.raises(PermissionError):
        pet_service.set_adoption_listing(pet.pet_id, 'user-b', False)


def test_delete_pet(pet_service):
    pet = pet_service.add_pet('owner-a', {'name': '초코', 'species': 'Dog'})

    with pytest.raises(PermissionError):
        pet_service.delete_pet(pet.pet_id, 'user-b')
    pet_service.delete_pet(pet.pet_id, 'owner-a')
    assert pet_service.get_pet(pet.pet_id) is None


# --- 라우트 ---

def test_register_and_fetch_pet(client, auth_headers):
    response = client.post('/api/pets/', json={'name': '초코', 'species': 'Dog', 'age': 2}, headers=auth_headers('owner-a'))
    assert response.status_code == 201
    pet_id = response.get_json()['pet_id']

    fetched = client.get(f'/api/pets/{pet_id}')
    assert fetched.status_code == 200
    assert fetched.get_json()['owner_id'] == 'owner-a'


def test_register_pet_validation(client, auth_headers):
    response = client.post('/api/pets/', json={'name': '초코', 'species': 'Dragon'}, headers=auth_headers('owner-a'))
    assert response.status_code == 400
    assert 'species' in response.get_json()['details']


def test_patch_rejects_owner_field(client, auth_headers, pet_service):
    """클라이언트가 owner_id를 보내면 스키마 단계에서 거부된다"""
    pet = pet_service.add_pet('owner-a', {'name': '초코', 'species': 'Dog'})

    response = client.patch(f'/api/pets/{pet.pet_id}', json={'owner_id': 'user-b'}, headers=auth_headers('owner-a'))
    assert response.status_code == 400
    assert pet_service.get_pet(pet.pet_id).owner_id == 'owner-a'


def test_adoption_listing_route(client, auth_headers, pet_service):
    pet = pet_service.add_pet('owner-a', {'name': '초코', 'species': 'Dog'})

    response = client.put(f'/api/pets/{pet.pet_id}/adoption-listing', json={'waiting_for_adoption': True}, headers=auth_headers('owner-a'))
    assert response.status_code == 200

    listings = client.get('/api/pets/adoption').get_json()['pets']
    assert [p['pet_id'] for p in listings] == [pet.pet_id]


def test_get_missing_pet(client):
    response = client.get('/api/pets/missing')
    assert response.status_code == 404
    assert response.get_json()['error_code'] == 'PET_NOT_FOUND'


def test_patch_with_empty_body(client, auth_headers, pet_service):
    """수정할 항목이 없으면 권한 오류가 아니라 잘못된 요청으로 응답한다"""
    pet = pet_service.add_pet('owner-a', {'name': '초코', 'species': 'Dog'})

    response = client.patch(f'/api/pets/{pet.pet_id}', json={}, headers=auth_headers('owner-a'))
    assert response.status_code == 400
    assert response.get_json()['error_code'] == 'INVALID_PAYLOAD'

    forbidden = client.patch(f'/api/pets/{pet.pet_id}', json={'name': '가로채기'}, headers=auth_headers('user-b'))
    assert forbidden.status_code == 403

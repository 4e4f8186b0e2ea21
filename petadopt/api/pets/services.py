# petadopt/api/pets/services.py
import logging
import uuid
from dataclasses import replace
from datetime import datetime
from typing import Dict, Any, Optional, List
from firebase_admin import firestore
from firebase_admin.firestore import Transaction

from petadopt.models.pet import Pet, PET_PLACEHOLDER_IMAGE
from petadopt.utils.datetime_utils import DateTimeUtils

# 소유권과 식별 정보는 프로필 수정 API로 바꿀 수 없습니다 (입양 워크플로우 전용).
PROTECTED_FIELDS = frozenset({'pet_id', 'owner_id', 'version', 'created_at'})

class PetService:
    """반려동물 프로필(등록/조회/수정/삭제)과 입양 대기 목록을 관리하는 서비스."""
    def __init__(self, db=None):
        self.db = db if db is not None else firestore.client()
        self.pets_ref = self.db.collection('pets')
        logging.info("PetService initialized.")

    def add_pet(self, owner_id: str, pet_data: Dict[str, Any]) -> Pet:
        """새 반려동물을 등록합니다. 등록한 사용자가 소유자가 됩니다."""
        pet_id = str(uuid.uuid4())
        now = DateTimeUtils.now()
        new_pet = Pet(
            pet_id=pet_id, owner_id=owner_id,
            name=pet_data['name'], species=pet_data['species'],
            age=pet_data.get('age'),
            image_url=pet_data.get('image_url') or PET_PLACEHOLDER_IMAGE,
            waiting_for_adoption=pet_data.get('waiting_for_adoption', False),
            created_at=now, updated_at=now
        )
        try:
            self.pets_ref.document(pet_id).set(new_pet.to_dict())
        except Exception as e:
            logging.error(f"Pet registration failed for user {owner_id}: {e}", exc_info=True)
            raise
        logging.info(f"Pet {pet_id} registered by {owner_id}")
        return new_pet

    def get_pet(self, pet_id: str) -> Optional[Pet]:
        """반려동물 문서를 Pet 객체로 반환합니다. 없으면 None."""
        doc = self.pets_ref.document(pet_id).get()
        if not doc.exists:
            return None
        return Pet.from_dict(doc.to_dict())

    def get_pet_profile(self, pet_id: str) -> Pet:
        """[공개용] 소유권 검사 없이 반려동물 프로필을 조회합니다."""
        pet = self.get_pet(pet_id)
        if not pet:
            raise FileNotFoundError("해당 ID의 반려동물을 찾을 수 없습니다.")
        return pet

    def get_pets_by_owner(self, owner_id: str) -> List[Pet]:
        """특정 사용자가 소유한 반려동물 목록을 최신 등록순으로 반환합니다."""
        docs = self.pets_ref.where('owner_id', '==', owner_id).stream()
        pets = [Pet.from_dict(doc.to_dict()) for doc in docs]
        return sorted(pets, key=lambda p: p.created_at, reverse=True)

    def get_pets_waiting_for_adoption(self) -> List[Pet]:
        """입양 대기 중인 반려동물 목록(입양 게시판)을 최신 등록순으로 반환합니다."""
        docs = self.pets_ref.where('waiting_for_adoption', '==', True).stream()
        pets = [Pet.from_dict(doc.to_dict()) for doc in docs]
        return sorted(pets, key=lambda p: p.created_at, reverse=True)

    def update_pet_profile(self, pet_id: str, user_id: str, update_data: Dict[str, Any]) -> Pet:
        """[소유자 전용] 반려동물 프로필 정보를 부분 업데이트합니다."""
        pet_ref = self.pets_ref.document(pet_id)
        doc = pet_ref.get()
        if not doc.exists or doc.to_dict().get('owner_id') != user_id:
            raise PermissionError("프로필을 수정할 권한이 없거나 반려동물을 찾을 수 없습니다.")
        if not update_data:
            raise ValueError("수정할 데이터가 제공되지 않았습니다.")
        protected = PROTECTED_FIELDS.intersection(update_data)
        if protected:
            raise ValueError(f"수정할 수 없는 필드입니다: {', '.join(sorted(protected))}")

        update_data = dict(update_data, updated_at=DateTimeUtils.now())
        pet_ref.update(DateTimeUtils.for_firestore(update_data))
        logging.info(f"Pet profile updated for {pet_id} with fields: {list(update_data.keys())}")
        return Pet.from_dict(pet_ref.get().to_dict())

    def set_adoption_listing(self, pet_id: str, user_id: str, waiting: bool) -> Pet:
        """[소유자 전용] 입양 게시판 등록 여부를 변경합니다."""
        return self.update_pet_profile(pet_id, user_id, {'waiting_for_adoption': waiting})

    def delete_pet(self, pet_id: str, user_id: str) -> None:
        """[소유자 전용] 반려동물을 삭제합니다."""
        pet_ref = self.pets_ref.document(pet_id)
        doc = pet_ref.get()
        if not doc.exists or doc.to_dict().get('owner_id') != user_id:
            raise PermissionError("반려동물을 삭제할 권한이 없거나 반려동물을 찾을 수 없습니다.")
        pet_ref.delete()
        logging.info(f"Pet {pet_id} deleted by {user_id}")

    # --- 트랜잭션용 메서드 (AdoptionService의 트랜잭션 안에서 호출) ---

    def get_pet_transactional(self, transaction: Transaction, pet_id: str) -> Optional[Pet]:
        """[트랜잭션용] 트랜잭션 안에서 반려동물 문서를 읽습니다."""
        doc = self.pets_ref.document(pet_id).get(transaction=transaction)
        if not doc.exists:
            return None
        return Pet.from_dict(doc.to_dict())

    def transfer_ownership_transactional(self, transaction: Transaction, pet: Pet, new_owner_id: str, now: datetime) -> Pet:
        """
        [트랜잭션용] 소유권을 이전하고 입양 대기 상태를 해제합니다.
        pet은 같은 트랜잭션에서 읽은 값이어야 하며, version을 그 값에서 1 증가시킵니다.
        """
        update_data = {
            'owner_id': new_owner_id,
            'waiting_for_adoption': False,
            'version': pet.version + 1,
            'updated_at': now,
        }
        transaction.update(self.pets_ref.document(pet.pet_id), DateTimeUtils.for_firestore(update_data))
        return replace(pet, **update_data)

# petadopt/api/adoptions/services.py
import logging
import uuid
from dataclasses import replace
from typing import List, Optional, Tuple
from firebase_admin import firestore
from firebase_admin.firestore import Transaction

from petadopt.models.adoption_request import AdoptionRequest, AdoptionStatus
from petadopt.models.notification import NotificationType
from petadopt.models.pet import Pet
from petadopt.api.pets.services import PetService
from petadopt.services.notification_service import NotificationService
from petadopt.utils.datetime_utils import DateTimeUtils

from .errors import (
    AdoptionError,
    AdoptionNotFoundError,
    AdoptionMismatchError,
    AdoptionStateError,
    AdoptionPermissionError,
    VersionConflictError,
)

class AdoptionService:
    """
    입양 신청의 생성, 조회, 수락/거절과 소유권 이전을 담당하는 서비스.

    - 요청한 사용자의 ID는 항상 인자로 명시적으로 전달받습니다.
    - 상태를 바꾸는 작업은 모두 하나의 Firestore 트랜잭션 안에서 검증 후 쓰기를 수행하므로,
      검증 실패나 중간 오류가 부분적으로 반영된 상태를 남기지 않습니다.
    """
    def __init__(self, db=None, pet_service: Optional[PetService] = None, notification_service: Optional[NotificationService] = None):
        self.db = db if db is not None else firestore.client()
        self.requests_ref = self.db.collection('adoption_requests')
        self.pet_service = pet_service or PetService(self.db)
        self.notification_service = notification_service
        logging.info("AdoptionService initialized.")

    def _pending_requests_query(self, pet_id: str):
        return self.requests_ref.where('pet_id', '==', pet_id).where('status', '==', AdoptionStatus.PENDING.value)

    def _notify(self, recipient_id: str, sender_id: str, n_type: NotificationType, target_id: str, target_summary: Optional[str] = None):
        if self.notification_service:
            self.notification_service.create_notification(
                recipient_id=recipient_id, sender_id=sender_id,
                n_type=n_type, target_id=target_id, target_summary=target_summary
            )

    # --- 조회 ---

    def get_request(self, request_id: str) -> AdoptionRequest:
        """입양 신청 한 건을 조회합니다."""
        doc = self.requests_ref.document(request_id).get()
        if not doc.exists:
            raise AdoptionNotFoundError("입양 신청을 찾을 수 없습니다.", reason="request")
        return AdoptionRequest.from_dict(doc.to_dict())

    def has_pending_request(self, pet_id: str, requester_id: str) -> bool:
        """해당 사용자가 이 반려동물에 대해 처리 대기 중인 신청을 가지고 있는지 확인합니다."""
        query = self._pending_requests_query(pet_id).where('requester_id', '==', requester_id).limit(1).stream()
        return next(query, None) is not None

    def list_pending_requests_for_pet(self, pet_id: str, owner_id: Optional[str] = None) -> List[AdoptionRequest]:
        """
        반려동물의 처리 대기 중인 신청 목록을 오래된 순으로 반환합니다.
        owner_id가 주어지면 해당 소유자에게 접수된 신청만 조회합니다.
        """
        query = self._pending_requests_query(pet_id)
        if owner_id is not None:
            query = query.where('owner_id', '==', owner_id)
        requests = [AdoptionRequest.from_dict(doc.to_dict()) for doc in query.stream()]
        return sorted(requests, key=lambda r: r.created_at)

    def list_requests_by_requester(self, requester_id: str) -> List[AdoptionRequest]:
        """사용자가 보낸 모든 입양 신청(상태 무관)을 최신순으로 반환합니다."""
        docs = self.requests_ref.where('requester_id', '==', requester_id).stream()
        requests = [AdoptionRequest.from_dict(doc.to_dict()) for doc in docs]
        return sorted(requests, key=lambda r: r.created_at, reverse=True)

    # --- 신청 ---

    def create_request(self, pet_id: str, requester_id: str) -> AdoptionRequest:
        """
        [트랜잭션] 입양 신청을 생성합니다.
        신청 시점의 소유자 ID를 함께 저장하여, 수락 시 소유권 변경 여부를 검증하는 데 사용합니다.
        입양 대기 중이 아닌 반려동물, 본인 소유 반려동물, 중복 신청은 거부합니다.
        """
        transaction = self.db.transaction()
        request_id = str(uuid.uuid4())
        request_ref = self.requests_ref.document(request_id)

        @firestore.transactional
        def _create_in_transaction(transaction: Transaction) -> Tuple[AdoptionRequest, Pet]:
            pet = self.pet_service.get_pet_transactional(transaction, pet_id)
            if not pet:
                raise AdoptionNotFoundError("입양을 신청할 반려동물을 찾을 수 없습니다.", reason="pet")
            if not pet.waiting_for_adoption:
                raise AdoptionStateError("입양 대기 중인 반려동물이 아닙니다.", reason="not listed")
            if pet.owner_id == requester_id:
                raise AdoptionStateError("본인의 반려동물에는 입양을 신청할 수 없습니다.", reason="own pet")

            duplicates = self._pending_requests_query(pet_id).where('requester_id', '==', requester_id).limit(1).stream(transaction=transaction)
            if next(duplicates, None) is not None:
                raise AdoptionStateError("이미 처리 대기 중인 입양 신청이 있습니다.", reason="duplicate")

            now = DateTimeUtils.now()
            new_request = AdoptionRequest(
                request_id=request_id, pet_id=pet_id,
                requester_id=requester_id, owner_id=pet.owner_id,
                status=AdoptionStatus.PENDING,
                created_at=now, updated_at=now
            )
            transaction.set(request_ref, new_request.to_dict())
            return new_request, pet

        try:
            new_request, pet = _create_in_transaction(transaction)
        except AdoptionError:
            raise
        except Exception as e:
            logging.error(f"Adoption request creation failed (pet_id: {pet_id}, requester: {requester_id}): {e}", exc_info=True)
            raise

        logging.info(f"Adoption request {request_id} created for pet {pet_id} by {requester_id}")
        self._notify(pet.owner_id, requester_id, NotificationType.ADOPTION_REQUESTED, request_id, pet.name)
        return new_request

    # --- 수락 ---

    def accept_request(self, request_id: str, pet_id: str, new_owner_id: str, acting_user_id: str) -> AdoptionRequest:
        """
        [트랜잭션] 입양 신청을 수락하고 소유권을 이전합니다.

        검증 순서 (첫 번째 실패에서 중단, 검증이 모두 끝나기 전에는 어떤 쓰기도 하지 않음):
        1. 신청 존재   2. 신청의 반려동물 일치   3. 신청자 일치   4. 대기 상태
        5. 반려동물 존재   6. 요청자가 현재 소유자   7. 신청 당시 소유자가 현재 소유자

        이후 같은 트랜잭션에서 다른 대기 신청을 모두 거절하고, 이 신청을 수락하며,
        반려동물의 소유자를 신청자로 바꾸고 입양 대기 상태를 해제합니다.
        """
        transaction = self.db.transaction()
        request_ref = self.requests_ref.document(request_id)

        @firestore.transactional
        def _accept_in_transaction(transaction: Transaction) -> Tuple[AdoptionRequest, List[AdoptionRequest], Pet]:
            request_doc = request_ref.get(transaction=transaction)
            if not request_doc.exists:
                raise AdoptionNotFoundError("입양 신청을 찾을 수 없습니다.", reason="request")
            adoption_request = AdoptionRequest.from_dict(request_doc.to_dict())

            if adoption_request.pet_id != pet_id:
                raise AdoptionMismatchError('pet')
            if adoption_request.requester_id != new_owner_id:
                raise AdoptionMismatchError('requester')
            if not adoption_request.is_pending:
                raise AdoptionStateError("이미 처리된 입양 신청입니다.", reason="not pending")

            pet = self.pet_service.get_pet_transactional(transaction, pet_id)
            if not pet:
                raise AdoptionNotFoundError("반려동물을 찾을 수 없습니다.", reason="pet")
            if pet.owner_id != acting_user_id:
                raise AdoptionPermissionError("반려동물의 현재 소유자만 입양 신청을 수락할 수 있습니다.", reason="not owner")
            if adoption_request.owner_id != acting_user_id:
                raise AdoptionPermissionError("신청 이후 소유자가 변경되어 이 신청을 수락할 수 없습니다.", reason="stale owner")

            siblings = [
                AdoptionRequest.from_dict(doc.to_dict())
                for doc in self._pending_requests_query(pet_id).stream(transaction=transaction)
                if doc.id != request_id
            ]

            # 검증 완료. 여기서부터는 쓰기만 수행합니다.
            now = DateTimeUtils.now()
            rejected_update = DateTimeUtils.for_firestore({'status': AdoptionStatus.REJECTED.value, 'updated_at': now})
            for sibling in siblings:
                transaction.update(self.requests_ref.document(sibling.request_id), rejected_update)

            transaction.update(request_ref, DateTimeUtils.for_firestore({'status': AdoptionStatus.ACCEPTED.value, 'updated_at': now}))
            transferred_pet = self.pet_service.transfer_ownership_transactional(transaction, pet, new_owner_id, now)

            accepted = replace(adoption_request, status=AdoptionStatus.ACCEPTED, updated_at=now)
            rejected = [replace(s, status=AdoptionStatus.REJECTED, updated_at=now) for s in siblings]
            return accepted, rejected, transferred_pet

        try:
            accepted, rejected, pet = _accept_in_transaction(transaction)
        except AdoptionError as e:
            logging.warning(f"Adoption request {request_id} not accepted ({e.error_code}, {e.reason}): {e.message}")
            raise
        except Exception as e:
            logging.error(f"Adoption accept transaction failed (request_id: {request_id}): {e}", exc_info=True)
            raise

        logging.info(f"Adoption request {request_id} accepted. Pet {pet_id} transferred {acting_user_id} -> {new_owner_id}, {len(rejected)} sibling request(s) rejected")

        self._notify(accepted.requester_id, acting_user_id, NotificationType.ADOPTION_ACCEPTED, request_id, pet.name)
        for sibling in rejected:
            self._notify(sibling.requester_id, acting_user_id, NotificationType.ADOPTION_REJECTED, sibling.request_id, pet.name)
        return accepted

    # --- 거절 ---

    def reject_request(self, request_id: str, acting_user_id: Optional[str] = None) -> AdoptionRequest:
        """
        [트랜잭션] 처리 대기 중인 입양 신청을 거절합니다.
        acting_user_id가 주어지면 신청을 받은 소유자 본인인지 확인합니다.
        이미 수락/거절된 신청은 다시 바꿀 수 없습니다.
        """
        transaction = self.db.transaction()
        request_ref = self.requests_ref.document(request_id)

        @firestore.transactional
        def _reject_in_transaction(transaction: Transaction) -> AdoptionRequest:
            request_doc = request_ref.get(transaction=transaction)
            if not request_doc.exists:
                raise AdoptionNotFoundError("입양 신청을 찾을 수 없습니다.", reason="request")
            adoption_request = AdoptionRequest.from_dict(request_doc.to_dict())

            if acting_user_id is not None and adoption_request.owner_id != acting_user_id:
                raise AdoptionPermissionError("입양 신청을 받은 소유자만 거절할 수 있습니다.", reason="not owner")
            if not adoption_request.is_pending:
                raise AdoptionStateError("이미 처리된 입양 신청입니다.", reason="not pending")

            now = DateTimeUtils.now()
            transaction.update(request_ref, DateTimeUtils.for_firestore({'status': AdoptionStatus.REJECTED.value, 'updated_at': now}))
            return replace(adoption_request, status=AdoptionStatus.REJECTED, updated_at=now)

        try:
            rejected = _reject_in_transaction(transaction)
        except AdoptionError:
            raise
        except Exception as e:
            logging.error(f"Adoption reject transaction failed (request_id: {request_id}): {e}", exc_info=True)
            raise

        logging.info(f"Adoption request {request_id} rejected")
        self._notify(rejected.requester_id, rejected.owner_id, NotificationType.ADOPTION_REJECTED, request_id)
        return rejected

    # --- 관리자용 소유권 이전 ---

    def transfer_ownership(self, pet_id: str, new_owner_id: str, expected_version: Optional[int] = None) -> Pet:
        """
        [트랜잭션] 입양 신청 절차 없이 소유권을 직접 이전합니다 (관리 목적).
        expected_version이 주어지면 저장된 version과 같을 때만 이전합니다 (compare-and-swap).
        """
        transaction = self.db.transaction()

        @firestore.transactional
        def _transfer_in_transaction(transaction: Transaction) -> Pet:
            pet = self.pet_service.get_pet_transactional(transaction, pet_id)
            if not pet:
                raise AdoptionNotFoundError("반려동물을 찾을 수 없습니다.", reason="pet")
            if expected_version is not None and pet.version != expected_version:
                raise VersionConflictError(
                    "다른 요청에 의해 반려동물 정보가 변경되었습니다. 새로고침 후 다시 시도해주세요.",
                    reason=f"expected {expected_version}, found {pet.version}"
                )
            return self.pet_service.transfer_ownership_transactional(transaction, pet, new_owner_id, DateTimeUtils.now())

        try:
            pet = _transfer_in_transaction(transaction)
        except AdoptionError:
            raise
        except Exception as e:
            logging.error(f"Ownership transfer failed (pet_id: {pet_id}): {e}", exc_info=True)
            raise

        logging.info(f"Pet {pet_id} ownership transferred to {new_owner_id} (version {pet.version})")
        return pet

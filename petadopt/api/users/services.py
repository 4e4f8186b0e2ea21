# petadopt/api/users/services.py
import logging
from dataclasses import asdict
from typing import Optional, Dict, Any, List
from firebase_admin import firestore

from petadopt.models.user import User
from petadopt.utils.datetime_utils import DateTimeUtils

class UserService:
    """
    사용자 프로필 관련 비즈니스 로직을 담당하는 서비스 클래스.
    입양 신청 목록에 신청자 프로필을 붙이는 일괄 조회도 제공합니다.
    """
    PUBLIC_FIELDS = ('user_id', 'display_name', 'photo_url', 'bio', 'city')

    def __init__(self, db=None):
        self.db = db if db is not None else firestore.client()
        self.users_ref = self.db.collection('users')

    def _to_public(self, user_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        profile = {key: data.get(key) for key in self.PUBLIC_FIELDS}
        profile['user_id'] = user_id
        return profile

    def get_user_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        """사용자의 공개 프로필을 조회합니다. 없으면 None."""
        doc = self.users_ref.document(user_id).get()
        if not doc.exists:
            return None
        return self._to_public(user_id, doc.to_dict())

    def get_profiles(self, user_ids: List[str]) -> Dict[str, Dict[str, Any]]:
        """여러 사용자의 공개 프로필을 {user_id: profile} 형태로 조회합니다. 없는 사용자는 제외됩니다."""
        profiles = {}
        for user_id in dict.fromkeys(user_ids):
            profile = self.get_user_profile(user_id)
            if profile:
                profiles[user_id] = profile
        return profiles

    def upsert_profile(self, user_id: str, profile_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        사용자 프로필을 수정합니다. 문서가 아직 없으면 새로 생성합니다
        (신원 제공자로 가입한 직후에는 users 문서가 없을 수 있음).
        """
        user_ref = self.users_ref.document(user_id)
        try:
            doc = user_ref.get()
            if doc.exists:
                update_data = dict(profile_data, updated_at=DateTimeUtils.now())
                user_ref.update(DateTimeUtils.for_firestore(update_data))
            else:
                new_user = User(user_id=user_id, **profile_data)
                user_ref.set(DateTimeUtils.for_firestore(asdict(new_user)))
                logging.info(f"User profile created for {user_id}")
        except Exception as e:
            logging.error(f"프로필 저장 실패 (user_id: {user_id}): {e}", exc_info=True)
            raise
        return self._to_public(user_id, user_ref.get().to_dict())

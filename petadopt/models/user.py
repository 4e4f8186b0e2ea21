# petadopt/models/user.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from petadopt.utils.datetime_utils import DateTimeUtils

@dataclass
class User:
    """
    Firestore 'users' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    입양 워크플로우에서는 신원 키(user_id)와 신청자 프로필 표시에만 사용됩니다.
    """
    user_id: str
    display_name: Optional[str] = None
    photo_url: Optional[str] = None
    bio: Optional[str] = None
    city: Optional[str] = None
    created_at: datetime = field(default_factory=DateTimeUtils.now)
    updated_at: datetime = field(default_factory=DateTimeUtils.now)

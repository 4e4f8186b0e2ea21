# petadopt/models/adoption_request.py
from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from typing import Dict, Any

from petadopt.utils.datetime_utils import DateTimeUtils

class AdoptionStatus(Enum):
    """입양 신청 상태. ACCEPTED와 REJECTED는 종료 상태입니다."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"

@dataclass
class AdoptionRequest:
    """
    Firestore 'adoption_requests' 컬렉션의 문서 구조.
    owner_id는 신청 시점의 반려동물 소유자이며, 수락 시점의 소유자와
    비교하여 그 사이에 소유권이 바뀌었는지 검출하는 데 사용됩니다.
    """
    request_id: str
    pet_id: str
    requester_id: str
    owner_id: str
    status: AdoptionStatus = AdoptionStatus.PENDING
    created_at: datetime = field(default_factory=DateTimeUtils.now)
    updated_at: datetime = field(default_factory=DateTimeUtils.now)

    @property
    def is_pending(self) -> bool:
        return self.status == AdoptionStatus.PENDING

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AdoptionRequest":
        """Firestore 딕셔너리를 AdoptionRequest로 변환합니다. 상태 문자열은 Enum으로 바뀝니다."""
        processed_data = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        processed_data['status'] = AdoptionStatus(processed_data.get('status', AdoptionStatus.PENDING.value))
        for key in ('created_at', 'updated_at'):
            if processed_data.get(key) is not None:
                processed_data[key] = DateTimeUtils.from_firestore(processed_data[key])
            else:
                processed_data.pop(key, None)
        return cls(**processed_data)

    def to_dict(self) -> Dict[str, Any]:
        """Enum 멤버를 문자열 값으로 바꿔 Firestore 저장용 딕셔너리로 변환합니다."""
        request_dict = asdict(self)
        request_dict['status'] = self.status.value
        return DateTimeUtils.for_firestore(request_dict)

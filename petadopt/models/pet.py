# petadopt/models/pet.py
from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Optional, Dict, Any
import logging

from petadopt.utils.datetime_utils import DateTimeUtils

PET_PLACEHOLDER_IMAGE = "/pet-placeholder.png"

@dataclass
class Pet:
    """
    Firestore 'pets' 컬렉션 문서 구조.
    소유자(owner_id)는 항상 한 명이며, 입양 대기(waiting_for_adoption) 상태인
    반려동물만 새로운 입양 신청을 받을 수 있습니다.
    version은 소유권이 이전될 때마다 1씩 증가합니다.
    """
    pet_id: str
    owner_id: str
    name: str
    species: str
    age: Optional[int] = None
    image_url: str = PET_PLACEHOLDER_IMAGE
    waiting_for_adoption: bool = False
    version: int = 0
    created_at: datetime = field(default_factory=DateTimeUtils.now)
    updated_at: datetime = field(default_factory=DateTimeUtils.now)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Pet":
        """
        Firestore에서 받은 딕셔너리로부터 Pet 인스턴스를 생성합니다.
        모델에 없는 필드는 무시하고, 타임스탬프와 나이 값을 정규화합니다.
        """
        processed_data = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}

        for key in ('created_at', 'updated_at'):
            if processed_data.get(key) is not None:
                processed_data[key] = DateTimeUtils.from_firestore(processed_data[key])
            else:
                processed_data.pop(key, None)

        # 나이는 문자열로 저장된 과거 데이터가 있어 정수로 변환합니다.
        age = processed_data.get('age')
        if age is not None and not isinstance(age, int):
            try:
                processed_data['age'] = int(age)
            except (TypeError, ValueError):
                logging.warning(f"Invalid age value '{age}' for pet {processed_data.get('pet_id')}. Ignoring.")
                processed_data['age'] = None

        if not processed_data.get('image_url'):
            processed_data['image_url'] = PET_PLACEHOLDER_IMAGE
        if processed_data.get('version') is None:
            processed_data['version'] = 0

        return cls(**processed_data)

    def to_dict(self) -> Dict[str, Any]:
        """Firestore 저장용 딕셔너리로 변환합니다."""
        return DateTimeUtils.for_firestore(asdict(self))

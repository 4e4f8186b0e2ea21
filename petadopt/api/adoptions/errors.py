# petadopt/api/adoptions/errors.py
"""
입양 워크플로우의 오류 분류.

모든 오류는 사용자에게 그대로 보여줄 수 있는 메시지와 함께,
라우트에서 응답 코드로 변환할 error_code / status_code를 가집니다.
reason은 어떤 검사가 실패했는지를 나타내는 기계 판독용 값입니다.
"""
from typing import Optional


class AdoptionError(Exception):
    """입양 워크플로우 오류의 공통 기반 클래스."""
    error_code = "ADOPTION_ERROR"
    status_code = 400

    def __init__(self, message: str, reason: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.reason = reason


class AdoptionNotFoundError(AdoptionError):
    """반려동물 또는 입양 신청 ID에 해당하는 문서가 없습니다."""
    error_code = "NOT_FOUND"
    status_code = 404


class AdoptionMismatchError(AdoptionError):
    """입양 신청에 저장된 반려동물/신청자 정보가 요청 값과 다릅니다."""
    error_code = "MISMATCH"
    status_code = 400

    _FIELD_LABELS = {
        'pet': '반려동물',
        'requester': '신청자',
    }

    def __init__(self, field: str):
        label = self._FIELD_LABELS.get(field, field)
        super().__init__(f"입양 신청의 {label} 정보가 요청과 일치하지 않습니다.", reason=field)
        self.field = field


class AdoptionStateError(AdoptionError):
    """입양 신청이 요청한 전이를 허용하지 않는 상태입니다 (이미 처리됨 등)."""
    error_code = "ALREADY_HANDLED"
    status_code = 409


class AdoptionPermissionError(AdoptionError):
    """요청한 사용자가 반려동물의 현재 소유자가 아니거나, 신청 이후 소유자가 바뀌었습니다."""
    error_code = "FORBIDDEN"
    status_code = 403


class VersionConflictError(AdoptionError):
    """소유권 이전 시 기대한 버전과 저장된 버전이 다릅니다."""
    error_code = "VERSION_CONFLICT"
    status_code = 409

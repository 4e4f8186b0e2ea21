# petadopt/api/adoptions/schemas.py
from marshmallow import Schema, fields, validate

from petadopt.models.adoption_request import AdoptionStatus

class AdoptionRequestCreateSchema(Schema):
    """POST /api/adoptions/ 입양 신청 요청 본문."""
    pet_id = fields.Str(required=True, validate=validate.Length(min=1), error_messages={"required": "pet_id는 필수 항목입니다."})

class AdoptionAcceptSchema(Schema):
    """POST /api/adoptions/<request_id>/accept 요청 본문. 화면에 표시된 신청 정보와 대조하는 데 사용합니다."""
    pet_id = fields.Str(required=True, validate=validate.Length(min=1))
    requester_id = fields.Str(required=True, validate=validate.Length(min=1))

class RequesterProfileSchema(Schema):
    """대기 신청 목록에 함께 표시할 신청자 공개 프로필."""
    user_id = fields.Str()
    display_name = fields.Str(allow_none=True)
    photo_url = fields.Str(allow_none=True)
    city = fields.Str(allow_none=True)

class AdoptionRequestResponseSchema(Schema):
    """입양 신청 응답 스키마."""
    request_id = fields.Str(dump_only=True)
    pet_id = fields.Str()
    requester_id = fields.Str()
    owner_id = fields.Str()
    status = fields.Str(validate=validate.OneOf([s.value for s in AdoptionStatus]))
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
    requester_profile = fields.Nested(RequesterProfileSchema, allow_none=True, dump_only=True)

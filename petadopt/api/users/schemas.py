# petadopt/api/users/schemas.py
from marshmallow import Schema, fields, validate

class UserPublicResponseSchema(Schema):
    """
    GET /api/users/{user_id}
    다른 사용자에게 보여줄 공개 프로필 정보만 포함합니다.
    """
    user_id = fields.Str(required=True, dump_only=True)
    display_name = fields.Str(allow_none=True)
    photo_url = fields.Str(allow_none=True)
    bio = fields.Str(allow_none=True)
    city = fields.Str(allow_none=True)

class UserProfileUpdateSchema(Schema):
    """PUT /api/users/me 프로필 수정 요청 스키마."""
    display_name = fields.Str(validate=validate.Length(min=1, max=40))
    photo_url = fields.Str(allow_none=True)
    bio = fields.Str(allow_none=True, validate=validate.Length(max=300))
    city = fields.Str(allow_none=True, validate=validate.Length(max=60))

# petadopt/api/pets/schemas.py
from marshmallow import Schema, fields, validate

PET_SPECIES = ["Dog", "Cat", "Bird", "Rabbit", "Other"]

class PetRegistrationSchema(Schema):
    """POST /api/pets/ 반려동물 등록 요청 스키마."""
    name = fields.Str(required=True, validate=validate.Length(min=1, max=30))
    species = fields.Str(required=True, validate=validate.OneOf(PET_SPECIES))
    age = fields.Int(required=False, allow_none=True, validate=validate.Range(min=0, max=50))
    image_url = fields.Str(required=False, allow_none=True)
    waiting_for_adoption = fields.Bool(required=False, load_default=False)

class PetUpdateSchema(Schema):
    """PATCH /api/pets/<pet_id> 정보 수정을 위한 스키마 (부분 업데이트용). 소유자 필드는 받지 않습니다."""
    name = fields.Str(validate=validate.Length(min=1, max=30))
    species = fields.Str(validate=validate.OneOf(PET_SPECIES))
    age = fields.Int(allow_none=True, validate=validate.Range(min=0, max=50))
    image_url = fields.Str()
    waiting_for_adoption = fields.Bool()

class PetResponseSchema(Schema):
    """반려동물 프로필 응답 스키마."""
    pet_id = fields.Str(dump_only=True)
    owner_id = fields.Str(dump_only=True)
    name = fields.Str()
    species = fields.Str()
    age = fields.Int(allow_none=True)
    image_url = fields.Str()
    waiting_for_adoption = fields.Bool()
    created_at = fields.DateTime()
    updated_at = fields.DateTime()

class AdoptionListingSchema(Schema):
    """PUT /api/pets/<pet_id>/adoption-listing 입양 게시 여부 변경 요청 스키마."""
    waiting_for_adoption = fields.Bool(required=True)

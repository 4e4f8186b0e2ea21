# petadopt/api/posts/schemas.py
from marshmallow import Schema, fields, validate

class PostCreateSchema(Schema):
    """POST /api/posts/ 요청 본문의 유효성을 검사합니다."""
    title = fields.Str(required=True, validate=validate.Length(min=1, max=100))
    content = fields.Str(required=True, validate=validate.Length(min=1, max=2000))
    image_urls = fields.List(fields.Str(), load_default=list)

class PostUpdateSchema(Schema):
    """PATCH /api/posts/{post_id} 요청 본문의 유효성을 검사합니다."""
    title = fields.Str(validate=validate.Length(min=1, max=100))
    content = fields.Str(validate=validate.Length(min=1, max=2000))
    image_urls = fields.List(fields.Str())

class PostResponseSchema(Schema):
    """게시글 정보 응답 형식."""
    post_id = fields.Str(dump_only=True)
    publisher_id = fields.Str(required=True)
    publisher = fields.Str(required=True)
    title = fields.Str()
    content = fields.Str()
    image_urls = fields.List(fields.Str())
    like_count = fields.Int()
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
    is_liked = fields.Bool(dump_only=True, dump_default=False)

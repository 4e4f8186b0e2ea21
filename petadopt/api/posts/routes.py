# petadopt/api/posts/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app, Response
from flask_jwt_extended import jwt_required, get_jwt_identity
from marshmallow import ValidationError

from .schemas import PostCreateSchema, PostUpdateSchema, PostResponseSchema

posts_bp = Blueprint('posts_bp', __name__)

MAX_PAGE_SIZE = 50

@posts_bp.route('/', methods=['POST'])
@jwt_required()
def create_post():
    """커뮤니티 게시글 작성 API."""
    user_id = get_jwt_identity()
    post_service = current_app.services['posts']
    try:
        post_data = PostCreateSchema().load(request.get_json(silent=True) or {})
        new_post = post_service.create_post(user_id, post_data)
        return jsonify(PostResponseSchema().dump(new_post)), 201
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except Exception as e:
        logging.error(f"게시글 생성 중 오류 발생: {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "게시글 생성 중 오류가 발생했습니다."}), 500

@posts_bp.route('/', methods=['GET'])
@jwt_required(optional=True)
def get_posts():
    """전체 게시글 목록을 최신순으로 조회합니다 (커서 기반 페이지네이션)."""
    user_id = get_jwt_identity()
    limit = request.args.get('limit', 10, type=int)
    cursor = request.args.get('cursor', None, type=str)
    if not 1 <= limit <= MAX_PAGE_SIZE:
        return jsonify({"error_code": "INVALID_LIMIT", "message": f"limit은 1에서 {MAX_PAGE_SIZE} 사이의 정수여야 합니다."}), 400
    post_service = current_app.services['posts']
    try:
        posts, next_cursor = post_service.get_posts(user_id, limit, cursor)
        return jsonify({
            "posts": PostResponseSchema(many=True).dump(posts),
            "next_cursor": next_cursor
        }), 200
    except Exception as e:
        logging.error(f"게시글 목록 조회 중 오류 발생: {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "게시글 목록 조회 중 오류가 발생했습니다."}), 500

@posts_bp.route('/users/<string:author_id>', methods=['GET'])
@jwt_required(optional=True)
def get_posts_by_user(author_id: str):
    """특정 사용자가 작성한 게시글 목록을 조회합니다."""
    user_id = get_jwt_identity()
    post_service = current_app.services['posts']
    try:
        posts = post_service.get_posts_by_user_id(author_id, user_id)
        return jsonify({"posts": PostResponseSchema(many=True).dump(posts)}), 200
    except Exception as e:
        logging.error(f"사용자 게시글 조회 중 오류 발생 (author_id: {author_id}): {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "게시글 목록 조회 중 오류가 발생했습니다."}), 500

@posts_bp.route('/<string:post_id>', methods=['GET'])
@jwt_required(optional=True)
def get_post(post_id: str):
    user_id = get_jwt_identity()
    post = current_app.services['posts'].get_post_by_id(post_id, user_id)
    if not post:
        return jsonify({"error_code": "POST_NOT_FOUND", "message": "게시글을 찾을 수 없습니다."}), 404
    return jsonify(PostResponseSchema().dump(post)), 200

@posts_bp.route('/<string:post_id>', methods=['PATCH'])
@jwt_required()
def update_post(post_id: str):
    user_id = get_jwt_identity()
    post_service = current_app.services['posts']
    try:
        data = PostUpdateSchema().load(request.get_json(silent=True) or {})
        if not data:
            return jsonify({"error_code": "INVALID_PAYLOAD", "message": "수정할 항목이 없습니다."}), 400
        updated_post = post_service.update_post(post_id, user_id, data)
        if not updated_post:
            return jsonify({"error_code": "FORBIDDEN_OR_NOT_FOUND", "message": "게시글을 수정할 권한이 없거나 게시글이 존재하지 않습니다."}), 403
        return jsonify(PostResponseSchema().dump(updated_post)), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400

@posts_bp.route('/<string:post_id>', methods=['DELETE'])
@jwt_required()
def delete_post(post_id: str):
    user_id = get_jwt_identity()
    if not current_app.services['posts'].delete_post(post_id, user_id):
        return jsonify({"error_code": "FORBIDDEN_OR_NOT_FOUND", "message": "게시글을 삭제할 권한이 없거나 게시글이 존재하지 않습니다."}), 403
    return Response(status=204)

@posts_bp.route('/<string:post_id>/like', methods=['POST'])
@jwt_required()
def toggle_post_like(post_id: str):
    """게시글 좋아요를 누르거나 취소합니다."""
    user_id = get_jwt_identity()
    try:
        is_liked = current_app.services['posts'].toggle_post_like(user_id, post_id)
        return jsonify({"is_liked": is_liked}), 200
    except ValueError as e:
        return jsonify({"error_code": "POST_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"게시글 좋아요 처리 중 오류 발생 (post_id: {post_id}): {e}", exc_info=True)
        return jsonify({"error_code": "LIKE_TOGGLE_FAILED", "message": "좋아요 처리 중 오류가 발생했습니다."}), 500

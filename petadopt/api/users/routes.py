# petadopt/api/users/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity
from marshmallow import ValidationError

from petadopt.api.users.schemas import UserPublicResponseSchema, UserProfileUpdateSchema

users_bp = Blueprint('users_bp', __name__)

@users_bp.route('/<string:user_id>', methods=['GET'])
@jwt_required(optional=True)
def get_user_profile(user_id: str):
    """특정 사용자의 공개 프로필 정보를 조회합니다."""
    user_service = current_app.services['users']
    try:
        user_profile = user_service.get_user_profile(user_id)
        if not user_profile:
            return jsonify({"error_code": "USER_NOT_FOUND", "message": "사용자를 찾을 수 없습니다."}), 404
        return jsonify(UserPublicResponseSchema().dump(user_profile)), 200
    except Exception as e:
        logging.error(f"사용자 프로필 조회 중 오류 발생 (user_id: {user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "PROFILE_FETCH_FAILED", "message": "프로필 조회 중 오류가 발생했습니다."}), 500

@users_bp.route('/me', methods=['PUT'])
@jwt_required()
def update_my_profile():
    """현재 로그인된 사용자의 프로필(이름, 사진, 소개, 지역)을 수정합니다."""
    user_id = get_jwt_identity()
    user_service = current_app.services['users']
    try:
        data = UserProfileUpdateSchema().load(request.get_json(silent=True) or {})
        if not data:
            return jsonify({"error_code": "INVALID_PAYLOAD", "message": "수정할 항목이 없습니다."}), 400
        updated_user = user_service.upsert_profile(user_id, data)
        return jsonify(UserPublicResponseSchema().dump(updated_user)), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except Exception as e:
        logging.error(f"프로필 수정 중 오류 발생 (user_id: {user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "UPDATE_FAILED", "message": "프로필 수정 중 서버 오류가 발생했습니다."}), 500

# petadopt/api/adoptions/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity
from marshmallow import ValidationError

from .errors import AdoptionError
from .schemas import (
    AdoptionRequestCreateSchema,
    AdoptionAcceptSchema,
    AdoptionRequestResponseSchema
)

adoptions_bp = Blueprint('adoptions_bp', __name__)

def _adoption_error_response(err: AdoptionError):
    """입양 워크플로우 오류를 '찾을 수 없음 / 이미 처리됨 / 권한 없음'이 구분되는 응답으로 변환합니다."""
    return jsonify({"error_code": err.error_code, "message": err.message}), err.status_code

@adoptions_bp.route('/', methods=['POST'])
@jwt_required()
def create_adoption_request():
    """입양 신청 API. 로그인한 사용자가 신청자가 됩니다."""
    user_id = get_jwt_identity()
    adoption_service = current_app.services['adoptions']
    try:
        data = AdoptionRequestCreateSchema().load(request.get_json(silent=True) or {})
        new_request = adoption_service.create_request(data['pet_id'], user_id)
        return jsonify(AdoptionRequestResponseSchema().dump(new_request.to_dict())), 201
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except AdoptionError as e:
        return _adoption_error_response(e)
    except Exception as e:
        logging.error(f"Adoption request API error: {e}", exc_info=True)
        return jsonify({"error_code": "ADOPTION_REQUEST_FAILED", "message": "입양 신청 중 오류가 발생했습니다. 다시 시도해주세요."}), 500

@adoptions_bp.route('/me', methods=['GET'])
@jwt_required()
def get_my_adoption_requests():
    """내가 보낸 입양 신청 목록(상태 무관)을 조회합니다."""
    user_id = get_jwt_identity()
    adoption_service = current_app.services['adoptions']
    try:
        requests = adoption_service.list_requests_by_requester(user_id)
        return jsonify({
            "requests": AdoptionRequestResponseSchema(many=True).dump([r.to_dict() for r in requests])
        }), 200
    except Exception as e:
        logging.error(f"My adoption requests API error (user_id: {user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "FETCH_FAILED", "message": "입양 신청 목록 조회 중 오류가 발생했습니다."}), 500

@adoptions_bp.route('/pets/<string:pet_id>/pending', methods=['GET'])
@jwt_required()
def get_pending_requests_for_pet(pet_id: str):
    """[소유자 전용] 반려동물에 접수된 대기 중인 신청 목록을 신청자 프로필과 함께 조회합니다."""
    user_id = get_jwt_identity()
    pet_service = current_app.services['pets']
    adoption_service = current_app.services['adoptions']
    user_service = current_app.services['users']
    try:
        pet = pet_service.get_pet(pet_id)
        if not pet:
            return jsonify({"error_code": "NOT_FOUND", "message": "반려동물을 찾을 수 없습니다."}), 404
        if pet.owner_id != user_id:
            return jsonify({"error_code": "FORBIDDEN", "message": "반려동물의 소유자만 입양 신청 목록을 볼 수 있습니다."}), 403

        pending = adoption_service.list_pending_requests_for_pet(pet_id, owner_id=user_id)
        # 신청자 프로필 조회 실패는 목록 조회를 막지 않습니다.
        try:
            profiles = user_service.get_profiles([r.requester_id for r in pending])
        except Exception as e:
            logging.warning(f"Requester profile lookup failed for pet {pet_id}: {e}")
            profiles = {}

        results = []
        for adoption_request in pending:
            request_dict = adoption_request.to_dict()
            request_dict['requester_profile'] = profiles.get(adoption_request.requester_id)
            results.append(request_dict)
        return jsonify({"requests": AdoptionRequestResponseSchema(many=True).dump(results)}), 200
    except Exception as e:
        logging.error(f"Pending adoption requests API error (pet_id: {pet_id}): {e}", exc_info=True)
        return jsonify({"error_code": "FETCH_FAILED", "message": "입양 신청 목록 조회 중 오류가 발생했습니다."}), 500

@adoptions_bp.route('/pets/<string:pet_id>/status', methods=['GET'])
@jwt_required()
def get_my_request_status(pet_id: str):
    """로그인한 사용자가 이 반려동물에 대기 중인 신청을 가지고 있는지 조회합니다 (중복 신청 버튼 숨김용)."""
    user_id = get_jwt_identity()
    adoption_service = current_app.services['adoptions']
    try:
        return jsonify({"has_pending_request": adoption_service.has_pending_request(pet_id, user_id)}), 200
    except Exception as e:
        logging.error(f"Adoption status API error (pet_id: {pet_id}): {e}", exc_info=True)
        return jsonify({"error_code": "FETCH_FAILED", "message": "입양 신청 상태 조회 중 오류가 발생했습니다."}), 500

@adoptions_bp.route('/<string:request_id>', methods=['GET'])
@jwt_required()
def get_adoption_request(request_id: str):
    """[신청자/소유자 전용] 입양 신청 한 건을 조회합니다."""
    user_id = get_jwt_identity()
    adoption_service = current_app.services['adoptions']
    try:
        adoption_request = adoption_service.get_request(request_id)
        if user_id not in (adoption_request.requester_id, adoption_request.owner_id):
            return jsonify({"error_code": "FORBIDDEN", "message": "입양 신청을 조회할 권한이 없습니다."}), 403
        return jsonify(AdoptionRequestResponseSchema().dump(adoption_request.to_dict())), 200
    except AdoptionError as e:
        return _adoption_error_response(e)
    except Exception as e:
        logging.error(f"Get adoption request API error (request_id: {request_id}): {e}", exc_info=True)
        return jsonify({"error_code": "FETCH_FAILED", "message": "입양 신청 조회 중 오류가 발생했습니다."}), 500

@adoptions_bp.route('/<string:request_id>/accept', methods=['POST'])
@jwt_required()
def accept_adoption_request(request_id: str):
    """[소유자 전용] 입양 신청을 수락하고 반려동물의 소유권을 신청자에게 이전합니다."""
    user_id = get_jwt_identity()
    adoption_service = current_app.services['adoptions']
    try:
        data = AdoptionAcceptSchema().load(request.get_json(silent=True) or {})
        accepted = adoption_service.accept_request(request_id, data['pet_id'], data['requester_id'], user_id)
        return jsonify(AdoptionRequestResponseSchema().dump(accepted.to_dict())), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except AdoptionError as e:
        return _adoption_error_response(e)
    except Exception as e:
        logging.error(f"Accept adoption request API error (request_id: {request_id}): {e}", exc_info=True)
        return jsonify({"error_code": "ACCEPT_FAILED", "message": "입양 신청 수락 중 오류가 발생했습니다. 다시 시도해주세요."}), 500

@adoptions_bp.route('/<string:request_id>/reject', methods=['POST'])
@jwt_required()
def reject_adoption_request(request_id: str):
    """[소유자 전용] 입양 신청을 거절합니다."""
    user_id = get_jwt_identity()
    adoption_service = current_app.services['adoptions']
    try:
        rejected = adoption_service.reject_request(request_id, acting_user_id=user_id)
        return jsonify(AdoptionRequestResponseSchema().dump(rejected.to_dict())), 200
    except AdoptionError as e:
        return _adoption_error_response(e)
    except Exception as e:
        logging.error(f"Reject adoption request API error (request_id: {request_id}): {e}", exc_info=True)
        return jsonify({"error_code": "REJECT_FAILED", "message": "입양 신청 거절 중 오류가 발생했습니다. 다시 시도해주세요."}), 500

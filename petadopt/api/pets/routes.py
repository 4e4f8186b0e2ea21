# petadopt/api/pets/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app, Response
from flask_jwt_extended import jwt_required, get_jwt_identity
from marshmallow import ValidationError

from .schemas import PetRegistrationSchema, PetUpdateSchema, PetResponseSchema, AdoptionListingSchema

pets_bp = Blueprint('pets_bp', __name__)

@pets_bp.route('/', methods=['POST'])
@jwt_required()
def register_pet():
    """반려동물 등록 API. 로그인한 사용자가 소유자가 됩니다."""
    user_id = get_jwt_identity()
    pet_service = current_app.services['pets']
    try:
        validated_data = PetRegistrationSchema().load(request.get_json(silent=True) or {})
        new_pet = pet_service.add_pet(user_id, validated_data)
        return jsonify(PetResponseSchema().dump(new_pet.to_dict())), 201
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except Exception as e:
        logging.error(f"Pet registration API error: {e}", exc_info=True)
        return jsonify({"error_code": "PET_REGISTRATION_FAILED", "message": "반려동물 등록 중 오류가 발생했습니다."}), 500

@pets_bp.route('/adoption', methods=['GET'])
def get_adoption_listings():
    """[공개용] 입양 대기 중인 반려동물 목록을 조회합니다."""
    pet_service = current_app.services['pets']
    try:
        pets = pet_service.get_pets_waiting_for_adoption()
        return jsonify({"pets": PetResponseSchema(many=True).dump([p.to_dict() for p in pets])}), 200
    except Exception as e:
        logging.error(f"Adoption listings API error: {e}", exc_info=True)
        return jsonify({"error_code": "FETCH_FAILED", "message": "입양 게시판을 불러오지 못했습니다. 다시 시도해주세요."}), 500

@pets_bp.route('/owners/<string:owner_id>', methods=['GET'])
@jwt_required(optional=True)
def get_pets_by_owner(owner_id: str):
    """특정 사용자가 소유한 반려동물 목록을 조회합니다."""
    pet_service = current_app.services['pets']
    try:
        pets = pet_service.get_pets_by_owner(owner_id)
        return jsonify({"pets": PetResponseSchema(many=True).dump([p.to_dict() for p in pets])}), 200
    except Exception as e:
        logging.error(f"Get pets by owner API error (owner_id: {owner_id}): {e}", exc_info=True)
        return jsonify({"error_code": "FETCH_FAILED", "message": "반려동물 목록 조회 중 오류가 발생했습니다."}), 500

@pets_bp.route('/<string:pet_id>', methods=['GET'])
@jwt_required(optional=True)
def get_pet_profile(pet_id: str):
    """[공개용] 반려동물 프로필을 조회합니다."""
    pet_service = current_app.services['pets']
    try:
        pet = pet_service.get_pet_profile(pet_id)
        return jsonify(PetResponseSchema().dump(pet.to_dict())), 200
    except FileNotFoundError as e:
        return jsonify({"error_code": "PET_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"Get pet profile API error (pet_id: {pet_id}): {e}", exc_info=True)
        return jsonify({"error_code": "FETCH_FAILED", "message": "프로필 조회 중 오류가 발생했습니다."}), 500

@pets_bp.route('/<string:pet_id>', methods=['PATCH'])
@jwt_required()
def update_pet_profile(pet_id: str):
    """[소유자 전용] 반려동물 프로필 정보를 수정합니다 (부분 업데이트, 입양 게시 여부 포함)."""
    user_id = get_jwt_identity()
    pet_service = current_app.services['pets']
    try:
        update_data = PetUpdateSchema().load(request.get_json(silent=True) or {})
        if not update_data:
            return jsonify({"error_code": "INVALID_PAYLOAD", "message": "수정할 항목이 없습니다."}), 400
        updated_pet = pet_service.update_pet_profile(pet_id, user_id, update_data)
        return jsonify(PetResponseSchema().dump(updated_pet.to_dict())), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except PermissionError as e:
        return jsonify({"error_code": "UPDATE_FAILED_FORBIDDEN", "message": str(e)}), 403
    except ValueError as e:
        return jsonify({"error_code": "INVALID_PAYLOAD", "message": str(e)}), 400
    except Exception as e:
        logging.error(f"Update pet profile API error (pet_id: {pet_id}): {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "프로필 수정 중 오류가 발생했습니다."}), 500

@pets_bp.route('/<string:pet_id>', methods=['DELETE'])
@jwt_required()
def delete_pet(pet_id: str):
    """[소유자 전용] 반려동물을 삭제합니다."""
    user_id = get_jwt_identity()
    pet_service = current_app.services['pets']
    try:
        pet_service.delete_pet(pet_id, user_id)
        return Response(status=204)
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN_OR_NOT_FOUND", "message": str(e)}), 403
    except Exception as e:
        logging.error(f"Delete pet API error (pet_id: {pet_id}): {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "반려동물 삭제 중 오류가 발생했습니다."}), 500

@pets_bp.route('/<string:pet_id>/adoption-listing', methods=['PUT'])
@jwt_required()
def set_adoption_listing(pet_id: str):
    """[소유자 전용] 반려동물을 입양 게시판에 올리거나 내립니다."""
    user_id = get_jwt_identity()
    pet_service = current_app.services['pets']
    try:
        data = AdoptionListingSchema().load(request.get_json(silent=True) or {})
        updated_pet = pet_service.set_adoption_listing(pet_id, user_id, data['waiting_for_adoption'])
        return jsonify(PetResponseSchema().dump(updated_pet.to_dict())), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN_OR_NOT_FOUND", "message": str(e)}), 403
    except Exception as e:
        logging.error(f"Adoption listing API error (pet_id: {pet_id}): {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "입양 게시 상태 변경 중 오류가 발생했습니다."}), 500

# petadopt/__init__.py

# =====================================================================================
# 1. 환경 변수 로드 (가장 먼저 실행)
# =====================================================================================
from dotenv import load_dotenv
load_dotenv()

# =====================================================================================
# 2. 모듈 임포트 (Module Imports)
# =====================================================================================
import os
import logging
from flask import Flask, jsonify
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException
from flask_jwt_extended import JWTManager
import firebase_admin
from firebase_admin import credentials, firestore

# - 설정
from petadopt.core.config import config_by_name

# - API 블루프린트
from petadopt.api.adoptions.routes import adoptions_bp
from petadopt.api.pets.routes import pets_bp
from petadopt.api.posts.routes import posts_bp
from petadopt.api.users.routes import users_bp

# - 서비스 모듈
from petadopt.services.notification_service import NotificationService
from petadopt.api.adoptions.services import AdoptionService
from petadopt.api.pets.services import PetService
from petadopt.api.posts.services import PostService
from petadopt.api.users.services import UserService

def create_app(config_name=None, db=None):
    """
    Flask 애플리케이션 팩토리 함수.

    :param config_name: 'development' / 'testing' / 'production' (기본값: FLASK_ENV)
    :param db: 주입할 Firestore 클라이언트. 없으면 서비스 계정으로 Firebase를 초기화합니다.
    """
    # =====================================================================================
    # 3. Flask 앱 생성 및 기본 설정
    # =====================================================================================
    config_name = config_name or os.getenv('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    app.json.ensure_ascii = False

    # =====================================================================================
    # 4. 확장 기능 및 외부 서비스 초기화
    # =====================================================================================
    JWTManager(app)

    if db is None:
        if not firebase_admin._apps:
            cred_path = app.config['FIREBASE_CREDENTIALS_PATH']
            if not cred_path or not os.path.exists(cred_path):
                raise FileNotFoundError(f"Firebase 인증 파일을 찾을 수 없습니다: {cred_path}")
            cred = credentials.Certificate(cred_path)
            options = {'projectId': app.config['FIREBASE_PROJECT_ID']} if app.config.get('FIREBASE_PROJECT_ID') else None
            firebase_admin.initialize_app(cred, options)
        db = firestore.client()

    # =====================================================================================
    # 5. 서비스 인스턴스 생성 및 'app.services'에 저장 (의존성 주입)
    # =====================================================================================
    app.services = {}

    # 5-1. 다른 서비스의 기반이 되는 공용 서비스
    app.services['notifications'] = NotificationService(db)
    app.services['users'] = UserService(db)
    app.services['pets'] = PetService(db)

    # 5-2. 다른 서비스를 주입받는 도메인 서비스
    app.services['posts'] = PostService(db, notification_service=app.services['notifications'])
    app.services['adoptions'] = AdoptionService(
        db,
        pet_service=app.services['pets'],
        notification_service=app.services['notifications']
    )
    logging.info("Services initialized successfully")

    # =====================================================================================
    # 6. 블루프린트 등록
    # =====================================================================================
    app.register_blueprint(adoptions_bp, url_prefix='/api/adoptions')
    app.register_blueprint(pets_bp, url_prefix='/api/pets')
    app.register_blueprint(posts_bp, url_prefix='/api/posts')
    app.register_blueprint(users_bp, url_prefix='/api/users')

    # =====================================================================================
    # 7. 전역 에러 핸들러 설정
    # =====================================================================================
    @app.errorhandler(ValidationError)
    def handle_marshmallow_validation(err):
        response = {"error_code": "VALIDATION_ERROR", "details": err.messages}
        return jsonify(response), 400

    @app.errorhandler(HTTPException)
    def handle_http_exception(err):
        # 404/405 등 라우팅 단계의 오류는 상태 코드를 그대로 유지
        response = {"error_code": err.name.upper().replace(' ', '_'), "message": err.description}
        return jsonify(response), err.code

    @app.errorhandler(Exception)
    def handle_generic_exception(err):
        # 다른 핸들러에서 처리되지 않은 모든 예외를 여기서 처리
        logging.error(f"An unhandled exception occurred: {err}", exc_info=True)
        response = {"error_code": "INTERNAL_SERVER_ERROR", "message": "서버 내부에서 예상치 못한 오류가 발생했습니다."}
        return jsonify(response), 500

    # =====================================================================================
    # 8. 로깅 및 앱 반환
    # =====================================================================================
    if not app.debug:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]')

    logging.info(f"Flask app created for '{config_name}' environment.")

    return app

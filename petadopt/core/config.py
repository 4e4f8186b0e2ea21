# petadopt/core/config.py

import os # 환경 변수를 읽기 위해 사용합니다.

class Config:
    """모든 환경 설정의 기반이 되는 공통 설정 클래스입니다."""
    # JWT 토큰 서명 키. 신원 제공자(Identity Provider)가 발급한 토큰을 검증하는 데 사용됩니다.
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY')
    # Firestore 프로젝트 ID (서비스 계정 파일에 포함되어 있으면 생략 가능)
    FIREBASE_PROJECT_ID = os.getenv('FIREBASE_PROJECT_ID')

class DevelopmentConfig(Config):
    """개발 환경을 위한 설정 클래스입니다."""
    DEBUG = True
    # 개발용 Firebase 프로젝트의 서비스 계정 키 파일 경로
    FIREBASE_CREDENTIALS_PATH = os.getenv('DEV_FIREBASE_CREDENTIALS_PATH')

class TestingConfig(Config):
    """테스트 환경을 위한 설정 클래스입니다."""
    TESTING = True
    DEBUG = False
    # 테스트에서는 .env가 없어도 토큰을 발급할 수 있도록 기본값을 둡니다.
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY', 'petadopt-testing-secret-key-0123456789')
    FIREBASE_CREDENTIALS_PATH = os.getenv('TEST_FIREBASE_CREDENTIALS_PATH')

class ProductionConfig(Config):
    """운영 환경을 위한 설정 클래스입니다."""
    DEBUG = False
    FIREBASE_CREDENTIALS_PATH = os.getenv('FIREBASE_CREDENTIALS_PATH')

# FLASK_ENV 값에 따라 create_app에서 설정 클래스를 선택할 때 사용합니다.
config_by_name = dict(
    development=DevelopmentConfig,
    testing=TestingConfig,
    production=ProductionConfig
)

""".env 환경설정 값을 관리합니다."""
from pydantic_settings import BaseSettings, SettingsConfigDict


ENV_PATH = ".env"


class Settings(BaseSettings):
    """.env 파일 설정 모델"""
    # .env 파일을 읽어서 환경변수를 설정합니다.
    model_config = SettingsConfigDict(
        env_file=ENV_PATH,
        env_file_encoding='utf-8',
        extra='ignore',  # extra=forbid (default)
    )

    APP_IS_DEBUG: bool = False  # 디버그 모드

    # 데이터베이스 설정
    # DB_URL 이 비어있으면 아래 접속정보로 URL을 생성합니다.
    DB_URL: str = ""
    DB_ENGINE: str = "sqlite"
    DB_USER: str = ""
    DB_PASSWORD: str = ""
    DB_HOST: str = ""
    DB_PORT: int = 3306
    DB_NAME: str = ""
    DB_CHARSET: str = "utf8mb4"

    # 페이징 설정
    PAGER_LIMIT: int = 10  # 한 페이지당 항목 수
    PAGER_KEY: str = "_page"  # 현재 페이지를 전달하는 요청 매개변수명

    TEMPLATE_DIR: str = "templates"  # 템플릿 경로

settings = Settings()

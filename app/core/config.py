# app/core/config.py

from functools import lru_cache
from typing import List
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """설정 클래스"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # 애플리케이션 설정
    app_name: str = Field(default="Movie Review API", description="애플리케이션 이름")
    debug: bool = Field(default=False, description="디버그 모드")

    # 데이터베이스 설정
    database_url: str = Field(
        default="sqlite:///./movie_review.db", description="SQLAlchemy 데이터베이스 URL"
    )
    database_echo: bool = Field(default=False, description="SQL 로그 출력 여부")

    # JWT 인증 설정
    secret_key: str = Field(default="secret-jwt-key", description="JWT 토큰 암호화 키")
    algorithm: str = Field(default="HS256", description="JWT 알고리즘")
    access_token_expire_minutes: int = Field(default=60 * 24 * 7, description="JWT 토큰 만료 시간(분)")

    # 로깅 설정
    log_level: str = Field(default="INFO", description="로그 레벨")
    log_json: bool = Field(default=True, description="JSON 형식 로그 출력 여부")

    # CORS 설정
    allowed_origins: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173"],
        description="허용할 CORS Origin 목록"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()

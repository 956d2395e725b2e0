# app/database.py

import uuid
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from dotenv import load_dotenv
from app.core.config import get_settings

# .env 파일 로드
load_dotenv()

settings = get_settings()

DATABASE_URL = settings.database_url

# SQLite는 요청 스레드와 생성 스레드가 다를 수 있음
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

# 엔진 생성
engine = create_engine(
    DATABASE_URL,
    echo=settings.database_echo,  # SQL 로그 출력
    pool_pre_ping=True,  # 연결 상태 확인
    pool_recycle=300,  # 5분마다 연결 재사용
    connect_args=connect_args,
)

# 세션 팩토리 생성
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)

# Base 클래스 생성
Base = declarative_base()


def generate_id() -> str:
    """24자리 16진수 문서 ID 생성"""
    return uuid.uuid4().hex[:24]


# 의존성 주입용 함수
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

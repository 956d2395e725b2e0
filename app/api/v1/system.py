# app/api/v1/system.py

from datetime import datetime, timezone
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from app.database import get_db
from app.core.config import get_settings
from app.core.exceptions import StorageFailureException

router = APIRouter()


@router.get("/health")
def health_check():
    """서비스 헬스체크"""
    return {
        "status": "healthy",
        "service": get_settings().app_name,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/db-test")
def check_db(db: Session = Depends(get_db)):
    """데이터베이스 연결 확인"""
    try:
        result = db.execute(text("SELECT 1")).scalar()
        return {"status": "DB 연결 성공!", "dialect": db.get_bind().dialect.name, "result": result}
    except SQLAlchemyError as e:
        raise StorageFailureException(f"DB 연결 실패: {str(e)}") from e

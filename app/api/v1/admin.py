# app/api/v1/admin.py

import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.user import UserPrivate
from app.services.rating_service import RatingService
from app.core.dependencies import get_current_admin

logger = logging.getLogger(__name__)

router = APIRouter()


def get_rating_service(db: Session = Depends(get_db)) -> RatingService:
    return RatingService(db)


@router.post(
    "/recalculate-ratings",
    summary="집계 재계산",
    description="관리자 전용: 모든 영화와 사용자의 평균 평점/리뷰 수를 리뷰 기준으로 다시 계산합니다.",
)
async def recalculate_ratings(
    admin: UserPrivate = Depends(get_current_admin),
    rating_service: RatingService = Depends(get_rating_service),
):
    """집계 불일치 보정"""
    logger.info(f"집계 재계산 요청 admin={admin.user_id}")
    result = rating_service.reconcile_all()
    return {"message": "집계 재계산이 완료되었습니다", **result}

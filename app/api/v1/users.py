# app/api/v1/users.py

from typing import Optional
from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.common import OBJECT_ID_PATTERN
from app.schemas.user import (
    User,
    UserPrivate,
    UserProfileUpdate,
    UserProfileUpdateResponse,
    UserListResponse,
    UserStats,
)
from app.schemas.review import ReviewListResponse
from app.schemas.watchlist import WatchlistListResponse, WatchlistCheck, WatchlistPriority
from app.services.user_service import UserService
from app.services.review_service import ReviewService
from app.services.watchlist_service import WatchlistService
from app.core.dependencies import get_user_service, get_current_user

router = APIRouter()


def get_review_service(db: Session = Depends(get_db)) -> ReviewService:
    return ReviewService(db)


def get_watchlist_service(db: Session = Depends(get_db)) -> WatchlistService:
    return WatchlistService(db)


@router.get(
    "/search/{query}",
    response_model=UserListResponse,
    summary="사용자 검색",
    description="사용자 이름으로 검색합니다. 리뷰를 많이 작성한 순으로 정렬됩니다.",
)
async def search_users(
    query: str = Path(description="검색어", min_length=1, max_length=30),
    page: int = Query(default=1, ge=1, description="페이지 번호"),
    limit: int = Query(default=10, ge=1, le=20, description="페이지 크기"),
    user_service: UserService = Depends(get_user_service),
):
    return await user_service.search_users(query, page, limit)


@router.get(
    "/{user_id}",
    response_model=User,
    summary="사용자 프로필",
    description="특정 사용자의 공개 프로필을 조회합니다.",
)
async def get_user_profile(
    user_id: str = Path(description="사용자 ID", pattern=OBJECT_ID_PATTERN),
    user_service: UserService = Depends(get_user_service),
):
    return await user_service.get_user_profile(user_id)


@router.put(
    "/{user_id}",
    response_model=UserProfileUpdateResponse,
    summary="프로필 수정",
    description="본인의 사용자 이름, 자기소개, 프로필 이미지를 수정합니다.",
)
async def update_user_profile(
    update_data: UserProfileUpdate,
    user_id: str = Path(description="사용자 ID", pattern=OBJECT_ID_PATTERN),
    current_user: UserPrivate = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
):
    return await user_service.update_profile(user_id, current_user.user_id, update_data)


@router.get(
    "/{user_id}/stats",
    response_model=UserStats,
    summary="사용자 통계",
    description="리뷰 수, 평균 평점, 받은 좋아요/싫어요 수, 많이 리뷰한 장르를 조회합니다.",
)
async def get_user_stats(
    user_id: str = Path(description="사용자 ID", pattern=OBJECT_ID_PATTERN),
    user_service: UserService = Depends(get_user_service),
):
    return await user_service.get_user_stats(user_id)


@router.get(
    "/{user_id}/reviews",
    response_model=ReviewListResponse,
    summary="사용자 리뷰 목록",
)
async def get_user_reviews(
    user_id: str = Path(description="사용자 ID", pattern=OBJECT_ID_PATTERN),
    page: int = Query(default=1, ge=1, description="페이지 번호"),
    limit: int = Query(default=10, ge=1, le=20, description="페이지 크기"),
    review_service: ReviewService = Depends(get_review_service),
):
    return await review_service.get_user_reviews(user_id, page, limit)


@router.get(
    "/{user_id}/watchlist",
    response_model=WatchlistListResponse,
    summary="사용자 왓치리스트 조회",
    description="특정 사용자의 왓치리스트를 조회합니다.",
)
async def get_user_watchlist(
    user_id: str = Path(description="사용자 ID", pattern=OBJECT_ID_PATTERN),
    page: int = Query(default=1, ge=1, description="페이지 번호"),
    limit: int = Query(default=10, ge=1, le=20, description="페이지 크기"),
    priority: Optional[WatchlistPriority] = Query(default=None, description="우선순위"),
    user_service: UserService = Depends(get_user_service),
    watchlist_service: WatchlistService = Depends(get_watchlist_service),
):
    # 사용자 존재 확인
    await user_service.get_user_profile(user_id)
    return await watchlist_service.get_user_watchlist(user_id, page, limit, priority)


@router.get(
    "/{user_id}/watchlist/check/{movie_id}",
    response_model=WatchlistCheck,
    summary="사용자 왓치리스트 포함 여부",
)
async def check_user_watchlist(
    user_id: str = Path(description="사용자 ID", pattern=OBJECT_ID_PATTERN),
    movie_id: str = Path(description="영화 ID", pattern=OBJECT_ID_PATTERN),
    user_service: UserService = Depends(get_user_service),
    watchlist_service: WatchlistService = Depends(get_watchlist_service),
):
    await user_service.get_user_profile(user_id)
    return await watchlist_service.check_movie(user_id, movie_id)

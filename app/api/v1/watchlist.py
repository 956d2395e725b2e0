# app/api/v1/watchlist.py

from typing import Optional
from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.common import OBJECT_ID_PATTERN, MessageResponse
from app.schemas.watchlist import (
    WatchlistItem,
    WatchlistCreate,
    WatchlistUpdate,
    WatchlistPriority,
    WatchlistListResponse,
    WatchlistCheck,
    WatchlistStats,
)
from app.schemas.user import UserPrivate
from app.services.watchlist_service import WatchlistService
from app.core.dependencies import get_current_user

router = APIRouter()


def get_watchlist_service(db: Session = Depends(get_db)) -> WatchlistService:
    return WatchlistService(db)


@router.get(
    "/",
    response_model=WatchlistListResponse,
    summary="내 왓치리스트",
    description="내 왓치리스트를 최근 추가순으로 조회합니다. 우선순위로 필터링할 수 있습니다.",
)
async def get_my_watchlist(
    page: int = Query(default=1, ge=1, description="페이지 번호"),
    limit: int = Query(default=10, ge=1, le=20, description="페이지 크기"),
    priority: Optional[WatchlistPriority] = Query(default=None, description="우선순위"),
    current_user: UserPrivate = Depends(get_current_user),
    watchlist_service: WatchlistService = Depends(get_watchlist_service),
):
    return await watchlist_service.get_user_watchlist(current_user.user_id, page, limit, priority)


@router.post(
    "/",
    response_model=WatchlistItem,
    status_code=status.HTTP_201_CREATED,
    summary="왓치리스트 추가",
)
async def add_to_watchlist(
    item_data: WatchlistCreate,
    current_user: UserPrivate = Depends(get_current_user),
    watchlist_service: WatchlistService = Depends(get_watchlist_service),
):
    return await watchlist_service.add_to_watchlist(current_user.user_id, item_data)


@router.get(
    "/stats",
    response_model=WatchlistStats,
    summary="왓치리스트 통계",
    description="우선순위 분포와 많이 담은 장르 TOP 5를 조회합니다.",
)
async def get_watchlist_stats(
    current_user: UserPrivate = Depends(get_current_user),
    watchlist_service: WatchlistService = Depends(get_watchlist_service),
):
    return await watchlist_service.get_stats(current_user.user_id)


@router.get(
    "/check/{movie_id}",
    response_model=WatchlistCheck,
    summary="왓치리스트 포함 여부",
)
async def check_watchlist(
    movie_id: str = Path(description="영화 ID", pattern=OBJECT_ID_PATTERN),
    current_user: UserPrivate = Depends(get_current_user),
    watchlist_service: WatchlistService = Depends(get_watchlist_service),
):
    return await watchlist_service.check_movie(current_user.user_id, movie_id)


@router.put(
    "/{item_id}",
    response_model=WatchlistItem,
    summary="왓치리스트 항목 수정",
    description="우선순위와 메모를 수정합니다.",
)
async def update_watchlist_item(
    update_data: WatchlistUpdate,
    item_id: str = Path(description="왓치리스트 항목 ID", pattern=OBJECT_ID_PATTERN),
    current_user: UserPrivate = Depends(get_current_user),
    watchlist_service: WatchlistService = Depends(get_watchlist_service),
):
    return await watchlist_service.update_item(item_id, current_user.user_id, update_data)


@router.delete(
    "/movie/{movie_id}",
    response_model=MessageResponse,
    summary="영화 ID로 왓치리스트 제거",
)
async def remove_movie_from_watchlist(
    movie_id: str = Path(description="영화 ID", pattern=OBJECT_ID_PATTERN),
    current_user: UserPrivate = Depends(get_current_user),
    watchlist_service: WatchlistService = Depends(get_watchlist_service),
):
    success = await watchlist_service.remove_movie(current_user.user_id, movie_id)
    return MessageResponse(message="왓치리스트에서 제거되었습니다", success=success)


@router.delete(
    "/{item_id}",
    response_model=MessageResponse,
    summary="왓치리스트 항목 제거",
)
async def remove_watchlist_item(
    item_id: str = Path(description="왓치리스트 항목 ID", pattern=OBJECT_ID_PATTERN),
    current_user: UserPrivate = Depends(get_current_user),
    watchlist_service: WatchlistService = Depends(get_watchlist_service),
):
    success = await watchlist_service.remove_item(item_id, current_user.user_id)
    return MessageResponse(message="왓치리스트에서 제거되었습니다", success=success)

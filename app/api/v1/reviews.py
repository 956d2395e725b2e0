# app/api/v1/reviews.py

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.common import OBJECT_ID_PATTERN
from app.schemas.movie import SortOrder
from app.schemas.review import (
    Review,
    ReviewCreate,
    ReviewUpdate,
    ReactionRequest,
    ReviewSortField,
    ReviewListResponse,
    ReviewMutationResponse,
)
from app.schemas.user import UserPrivate
from app.services.review_service import ReviewService
from app.core.dependencies import get_current_user

router = APIRouter()


def get_review_service(db: Session = Depends(get_db)) -> ReviewService:
    return ReviewService(db)


@router.get(
    "/movie/{movie_id}",
    response_model=ReviewListResponse,
    summary="영화 리뷰 조회",
    description="특정 영화의 리뷰를 조회합니다. 평점, 작성일, 좋아요 수로 정렬할 수 있습니다.",
)
async def get_movie_reviews(
    movie_id: str = Path(description="영화 ID", pattern=OBJECT_ID_PATTERN),
    page: int = Query(default=1, ge=1, description="페이지 번호"),
    limit: int = Query(default=10, ge=1, le=20, description="페이지 크기"),
    sort: ReviewSortField = Query(default=ReviewSortField.created_at, description="정렬 기준"),
    order: SortOrder = Query(default=SortOrder.desc, description="정렬 방향"),
    review_service: ReviewService = Depends(get_review_service),
):
    return await review_service.get_movie_reviews(movie_id, page, limit, sort, order)


@router.get(
    "/user/{user_id}",
    response_model=ReviewListResponse,
    summary="사용자 리뷰 조회",
    description="특정 사용자가 작성한 리뷰를 최신순으로 조회합니다.",
)
async def get_user_reviews(
    user_id: str = Path(description="사용자 ID", pattern=OBJECT_ID_PATTERN),
    page: int = Query(default=1, ge=1, description="페이지 번호"),
    limit: int = Query(default=10, ge=1, le=20, description="페이지 크기"),
    review_service: ReviewService = Depends(get_review_service),
):
    return await review_service.get_user_reviews(user_id, page, limit)


@router.get(
    "/{review_id}",
    response_model=Review,
    summary="리뷰 단건 조회",
)
async def get_review(
    review_id: str = Path(description="리뷰 ID", pattern=OBJECT_ID_PATTERN),
    review_service: ReviewService = Depends(get_review_service),
):
    return await review_service.get_review(review_id)


@router.post(
    "/",
    response_model=ReviewMutationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="리뷰 작성",
    description="영화에 리뷰를 작성합니다. 영화당 한 번만 작성할 수 있습니다.",
)
async def create_review(
    review_data: ReviewCreate,
    current_user: UserPrivate = Depends(get_current_user),
    review_service: ReviewService = Depends(get_review_service),
):
    return await review_service.create_review(current_user.user_id, review_data)


@router.put(
    "/{review_id}",
    response_model=ReviewMutationResponse,
    summary="리뷰 수정",
    description="자신의 리뷰를 수정합니다.",
)
async def update_review(
    review_data: ReviewUpdate,
    review_id: str = Path(description="리뷰 ID", pattern=OBJECT_ID_PATTERN),
    current_user: UserPrivate = Depends(get_current_user),
    review_service: ReviewService = Depends(get_review_service),
):
    return await review_service.update_review(review_id, current_user.user_id, review_data)


@router.delete(
    "/{review_id}",
    response_model=ReviewMutationResponse,
    summary="리뷰 삭제",
    description="자신의 리뷰를 삭제합니다.",
)
async def delete_review(
    review_id: str = Path(description="리뷰 ID", pattern=OBJECT_ID_PATTERN),
    current_user: UserPrivate = Depends(get_current_user),
    review_service: ReviewService = Depends(get_review_service),
):
    return await review_service.delete_review(review_id, current_user.user_id)


@router.post(
    "/{review_id}/reaction",
    response_model=Review,
    summary="리뷰 좋아요/싫어요",
    description="리뷰에 좋아요 또는 싫어요를 토글합니다. 본인 리뷰에는 반응할 수 없습니다.",
)
async def toggle_reaction(
    reaction: ReactionRequest,
    review_id: str = Path(description="리뷰 ID", pattern=OBJECT_ID_PATTERN),
    current_user: UserPrivate = Depends(get_current_user),
    review_service: ReviewService = Depends(get_review_service),
):
    return await review_service.toggle_reaction(
        review_id, current_user.user_id, reaction.reaction_type
    )

# app/api/v1/movies.py

from typing import List, Optional
from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.common import OBJECT_ID_PATTERN, MessageResponse
from app.schemas.movie import (
    Movie,
    MovieCreate,
    MovieUpdate,
    MovieListResponse,
    MovieMutationResponse,
    MovieSortField,
    SortOrder,
    Genre,
    MIN_RELEASE_YEAR,
)
from app.schemas.user import UserPrivate
from app.services.movie_service import MovieService
from app.core.dependencies import get_current_admin
from app.core.exceptions import ValidationFailedException

router = APIRouter()


def get_movie_service(db: Session = Depends(get_db)) -> MovieService:
    return MovieService(db)


def _parse_genres(genre: Optional[str]) -> Optional[List[str]]:
    if not genre:
        return None
    names = [g.strip() for g in genre.split(",") if g.strip()]
    allowed = {g.value for g in Genre}
    invalid = [name for name in names if name not in allowed]
    if invalid:
        raise ValidationFailedException(f"지원하지 않는 장르입니다: {', '.join(invalid)}")
    return names


@router.get(
    "/",
    response_model=MovieListResponse,
    summary="영화 목록",
    description="장르, 개봉 연도, 최소 평점, 검색어로 필터링하고 정렬/페이지네이션합니다.",
)
async def get_movies(
    page: int = Query(default=1, ge=1, description="페이지 번호"),
    limit: int = Query(default=12, ge=1, le=50, description="페이지 크기"),
    genre: Optional[str] = Query(default=None, description="장르 (쉼표로 구분)"),
    year: Optional[int] = Query(default=None, ge=MIN_RELEASE_YEAR, description="개봉 연도"),
    rating: Optional[float] = Query(default=None, ge=0, le=5, description="최소 평균 평점"),
    search: Optional[str] = Query(default=None, max_length=100, description="제목/감독/줄거리 검색어"),
    sort: MovieSortField = Query(default=MovieSortField.release_year, description="정렬 기준"),
    order: SortOrder = Query(default=SortOrder.desc, description="정렬 방향"),
    movie_service: MovieService = Depends(get_movie_service),
):
    return await movie_service.get_movies(
        page=page,
        limit=limit,
        genres=_parse_genres(genre),
        year=year,
        min_rating=rating,
        search=search,
        sort=sort,
        order=order,
    )


@router.get(
    "/featured",
    response_model=List[Movie],
    summary="추천 영화",
    description="추천 영화 6개를 평점 순으로 조회합니다.",
)
async def get_featured_movies(movie_service: MovieService = Depends(get_movie_service)):
    return await movie_service.get_featured_movies()


@router.get(
    "/trending",
    response_model=List[Movie],
    summary="트렌딩 영화",
    description="트렌딩 영화 6개를 리뷰 수 순으로 조회합니다.",
)
async def get_trending_movies(movie_service: MovieService = Depends(get_movie_service)):
    return await movie_service.get_trending_movies()


@router.get(
    "/{movie_id}",
    response_model=Movie,
    summary="영화 상세 정보",
    description="영화 상세 정보를 조회합니다.",
)
async def get_movie(
    movie_id: str = Path(description="영화 ID", pattern=OBJECT_ID_PATTERN),
    movie_service: MovieService = Depends(get_movie_service),
):
    return await movie_service.get_movie(movie_id)


@router.post(
    "/",
    response_model=MovieMutationResponse,
    status_code=201,
    summary="영화 등록",
    description="관리자 전용: 영화를 등록합니다.",
)
async def create_movie(
    movie_data: MovieCreate,
    admin: UserPrivate = Depends(get_current_admin),
    movie_service: MovieService = Depends(get_movie_service),
):
    movie = await movie_service.create_movie(movie_data)
    return MovieMutationResponse(message="영화가 등록되었습니다", movie=movie)


@router.put(
    "/{movie_id}",
    response_model=MovieMutationResponse,
    summary="영화 수정",
    description="관리자 전용: 영화 정보를 수정합니다.",
)
async def update_movie(
    movie_data: MovieUpdate,
    movie_id: str = Path(description="영화 ID", pattern=OBJECT_ID_PATTERN),
    admin: UserPrivate = Depends(get_current_admin),
    movie_service: MovieService = Depends(get_movie_service),
):
    movie = await movie_service.update_movie(movie_id, movie_data)
    return MovieMutationResponse(message="영화가 수정되었습니다", movie=movie)


@router.delete(
    "/{movie_id}",
    response_model=MessageResponse,
    summary="영화 삭제",
    description="관리자 전용: 영화와 관련 리뷰, 왓치리스트 항목을 삭제합니다.",
)
async def delete_movie(
    movie_id: str = Path(description="영화 ID", pattern=OBJECT_ID_PATTERN),
    admin: UserPrivate = Depends(get_current_admin),
    movie_service: MovieService = Depends(get_movie_service),
):
    success = await movie_service.delete_movie(movie_id)
    return MessageResponse(message="영화가 삭제되었습니다", success=success)

# app/services/movie_service.py

import logging
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import select, func, or_, asc, desc
from sqlalchemy.exc import SQLAlchemyError
from app.models.movie import MovieModel
from app.models.movie_genre import MovieGenreModel
from app.models.review import ReviewModel
from app.models.review_reaction import ReviewReactionModel
from app.models.watchlist import WatchlistModel
from app.schemas.movie import (
    Movie,
    MovieCreate,
    MovieUpdate,
    MovieListResponse,
    MovieSortField,
    SortOrder,
)
from app.schemas.common import Pagination, page_offset
from app.services.rating_service import RatingService
from app.core.exceptions import MovieReviewException, NotFoundException, StorageFailureException

logger = logging.getLogger(__name__)

HIGHLIGHT_LIMIT = 6

SORT_COLUMNS = {
    MovieSortField.title: MovieModel.title,
    MovieSortField.release_year: MovieModel.release_year,
    MovieSortField.average_rating: MovieModel.average_rating,
    MovieSortField.total_reviews: MovieModel.total_reviews,
}


class MovieService:

    def __init__(self, db: Session, rating_service: Optional[RatingService] = None):
        self.db = db
        self.rating_service = rating_service or RatingService(db)

    async def get_movies(
        self,
        page: int = 1,
        limit: int = 12,
        genres: Optional[List[str]] = None,
        year: Optional[int] = None,
        min_rating: Optional[float] = None,
        search: Optional[str] = None,
        sort: MovieSortField = MovieSortField.release_year,
        order: SortOrder = SortOrder.desc,
    ) -> MovieListResponse:
        """영화 목록 (필터, 정렬, 페이지네이션)"""
        try:
            conditions = []
            if genres:
                genre_movies = select(MovieGenreModel.movie_id).where(MovieGenreModel.genre.in_(genres))
                conditions.append(MovieModel.movie_id.in_(genre_movies))
            if year is not None:
                conditions.append(MovieModel.release_year == year)
            if min_rating is not None:
                conditions.append(MovieModel.average_rating >= min_rating)
            if search:
                pattern = f"%{search.strip()}%"
                conditions.append(
                    or_(
                        MovieModel.title.ilike(pattern),
                        MovieModel.director.ilike(pattern),
                        MovieModel.synopsis.ilike(pattern),
                    )
                )

            direction = asc if order == SortOrder.asc else desc
            stmt = (
                select(MovieModel)
                .where(*conditions)
                .order_by(direction(SORT_COLUMNS[sort]), direction(MovieModel.movie_id))
                .limit(limit)
                .offset(page_offset(page, limit))
            )
            movies = self.db.execute(stmt).scalars().all()

            count_stmt = select(func.count(MovieModel.movie_id)).where(*conditions)
            total = self.db.execute(count_stmt).scalar() or 0

            logger.debug(f"영화 목록 조회 page={page} found={len(movies)} total={total}")
            return MovieListResponse(
                movies=[Movie.from_orm(movie) for movie in movies],
                pagination=Pagination.build(page, limit, total),
            )

        except SQLAlchemyError as e:
            raise StorageFailureException(f"영화 목록 조회 실패: {str(e)}") from e

    async def get_featured_movies(self) -> List[Movie]:
        return await self._get_highlighted(
            MovieModel.featured == True,  # noqa: E712
            desc(MovieModel.average_rating),
            desc(MovieModel.total_reviews),
        )

    async def get_trending_movies(self) -> List[Movie]:
        return await self._get_highlighted(
            MovieModel.trending == True,  # noqa: E712
            desc(MovieModel.total_reviews),
            desc(MovieModel.average_rating),
        )

    async def _get_highlighted(self, condition, *ordering) -> List[Movie]:
        try:
            stmt = select(MovieModel).where(condition).order_by(*ordering).limit(HIGHLIGHT_LIMIT)
            return [Movie.from_orm(movie) for movie in self.db.execute(stmt).scalars().all()]
        except SQLAlchemyError as e:
            raise StorageFailureException(f"영화 조회 실패: {str(e)}") from e

    async def get_movie(self, movie_id: str) -> Movie:
        try:
            movie = self.db.get(MovieModel, movie_id)
            if not movie:
                raise NotFoundException("영화를 찾을 수 없습니다")
            return Movie.from_orm(movie)
        except SQLAlchemyError as e:
            raise StorageFailureException(f"영화 조회 실패: {str(e)}") from e

    async def create_movie(self, movie_data: MovieCreate) -> Movie:
        try:
            data = movie_data.model_dump(exclude={"genres"})
            movie = MovieModel(**self._normalize_urls(data))
            self._set_genres(movie, movie_data.genres)

            self.db.add(movie)
            self.db.commit()
            self.db.refresh(movie)

            logger.info(f"영화 등록 movie_id={movie.movie_id} title={movie.title}")
            return Movie.from_orm(movie)

        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageFailureException(f"영화 등록 실패: {str(e)}") from e

    async def update_movie(self, movie_id: str, movie_data: MovieUpdate) -> Movie:
        try:
            movie = self.db.get(MovieModel, movie_id)
            if not movie:
                raise NotFoundException("영화를 찾을 수 없습니다")

            data = movie_data.model_dump(exclude_unset=True, exclude={"genres"})
            for field, value in self._normalize_urls(data).items():
                setattr(movie, field, value)
            if movie_data.genres is not None:
                # 기존 장르 삭제 후 재등록 (같은 기본키 충돌 방지)
                movie.genre_links.clear()
                self.db.flush()
                self._set_genres(movie, movie_data.genres)

            self.db.commit()
            self.db.refresh(movie)
            return Movie.from_orm(movie)

        except MovieReviewException:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageFailureException(f"영화 수정 실패: {str(e)}") from e

    async def delete_movie(self, movie_id: str) -> bool:
        """영화 삭제. 리뷰/반응/왓치리스트도 함께 삭제하고 리뷰 작성자 집계를 다시 계산"""
        try:
            movie = self.rating_service.lock_movie(movie_id)
            if not movie:
                raise NotFoundException("영화를 찾을 수 없습니다")

            review_ids = select(ReviewModel.review_id).where(ReviewModel.movie_id == movie_id)
            author_ids = (
                self.db.execute(
                    select(ReviewModel.user_id).where(ReviewModel.movie_id == movie_id).distinct()
                )
                .scalars()
                .all()
            )

            self.db.execute(
                ReviewReactionModel.__table__.delete().where(
                    ReviewReactionModel.review_id.in_(review_ids)
                )
            )
            self.db.execute(ReviewModel.__table__.delete().where(ReviewModel.movie_id == movie_id))
            self.db.execute(WatchlistModel.__table__.delete().where(WatchlistModel.movie_id == movie_id))
            self.db.delete(movie)
            self.db.flush()

            for author_id in sorted(author_ids):
                self.rating_service.recalculate_user_rating(author_id)

            self.db.commit()
            logger.info(f"영화 삭제 movie_id={movie_id} affected_users={len(author_ids)}")
            return True

        except MovieReviewException:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageFailureException(f"영화 삭제 실패: {str(e)}") from e

    def _set_genres(self, movie: MovieModel, genres) -> None:
        movie.genre_links = [
            MovieGenreModel(genre=genre.value, position=position)
            for position, genre in enumerate(genres)
        ]

    def _normalize_urls(self, data: dict) -> dict:
        for field in ("poster_url", "trailer_url"):
            if data.get(field) is not None:
                data[field] = str(data[field])
        return data

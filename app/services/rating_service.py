# app/services/rating_service.py

"""리뷰 집계(평균 평점, 리뷰 수) 재계산

영화와 사용자 테이블에 캐시된 집계 값은 항상 해당 범위의 전체 리뷰를 다시 읽어서 계산한다.
증분 계산은 하지 않는다. 이 서비스는 commit 하지 않으며, 트랜잭션 경계는 호출하는 쪽
(ReviewService, MovieService)이 가진다. 리뷰 변경과 집계 갱신이 같은 트랜잭션에서 commit 된다.

같은 영화/사용자에 대한 동시 쓰기는 lock_movie / lock_user 의 SELECT ... FOR UPDATE 로
직렬화된다. 영화 -> 사용자 순서로 잠근다. (SQLite 에서는 FOR UPDATE 가 생략된다)
"""

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional
from sqlalchemy import select
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from app.models.movie import MovieModel
from app.models.user import UserModel
from app.models.review import ReviewModel
from app.schemas.review import RatingAggregate
from app.core.exceptions import NotFoundException, StorageFailureException

logger = logging.getLogger(__name__)

ONE_DECIMAL = Decimal("0.1")
ZERO_RATING = Decimal("0.0")


def compute_average(ratings: Iterable[int]) -> Decimal:
    """평점 평균을 소수 첫째 자리까지 반올림(half-up). 리뷰가 없으면 0"""
    ratings = list(ratings)
    if not ratings:
        return ZERO_RATING
    average = Decimal(sum(ratings)) / Decimal(len(ratings))
    return average.quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP)


class RatingService:

    def __init__(self, db: Session):
        self.db = db

    def lock_movie(self, movie_id: str) -> Optional[MovieModel]:
        """영화 행을 잠그고 반환 (없으면 None)"""
        stmt = select(MovieModel).where(MovieModel.movie_id == movie_id).with_for_update()
        return self.db.execute(stmt).scalar_one_or_none()

    def lock_user(self, user_id: str) -> Optional[UserModel]:
        """사용자 행을 잠그고 반환 (없으면 None)"""
        stmt = select(UserModel).where(UserModel.user_id == user_id).with_for_update()
        return self.db.execute(stmt).scalar_one_or_none()

    def _ratings_for(self, column, scope_id: str) -> list:
        stmt = select(ReviewModel.rating).where(column == scope_id)
        return list(self.db.execute(stmt).scalars().all())

    def recalculate_movie_rating(self, movie_id: str) -> RatingAggregate:
        """영화의 전체 리뷰를 다시 읽어 average_rating / total_ratings / total_reviews 갱신"""
        movie = self.lock_movie(movie_id)
        if not movie:
            raise NotFoundException("영화를 찾을 수 없습니다")

        ratings = self._ratings_for(ReviewModel.movie_id, movie_id)
        movie.average_rating = compute_average(ratings)
        movie.total_reviews = len(ratings)
        movie.total_ratings = len(ratings)
        self.db.flush()

        logger.info(
            f"영화 집계 갱신 movie_id={movie_id} average={movie.average_rating} "
            f"reviews={movie.total_reviews}"
        )
        return RatingAggregate(
            scope_id=movie_id,
            average_rating=movie.average_rating,
            total_reviews=movie.total_reviews,
            total_ratings=movie.total_ratings,
        )

    def recalculate_user_rating(self, user_id: str) -> RatingAggregate:
        """사용자가 작성한 전체 리뷰를 다시 읽어 average_rating / total_reviews 갱신"""
        user = self.lock_user(user_id)
        if not user:
            raise NotFoundException("사용자를 찾을 수 없습니다")

        ratings = self._ratings_for(ReviewModel.user_id, user_id)
        user.average_rating = compute_average(ratings)
        user.total_reviews = len(ratings)
        self.db.flush()

        logger.info(
            f"사용자 집계 갱신 user_id={user_id} average={user.average_rating} "
            f"reviews={user.total_reviews}"
        )
        return RatingAggregate(
            scope_id=user_id,
            average_rating=user.average_rating,
            total_reviews=user.total_reviews,
        )

    def reconcile_all(self) -> dict:
        """모든 영화/사용자 집계를 다시 계산하고 commit. 값이 바뀐 항목 수를 반환"""
        try:
            movies_fixed = 0
            movie_ids = self.db.execute(select(MovieModel.movie_id)).scalars().all()
            for movie_id in movie_ids:
                movie = self.db.get(MovieModel, movie_id)
                before = (Decimal(movie.average_rating or 0), movie.total_reviews, movie.total_ratings)
                after = self.recalculate_movie_rating(movie_id)
                if before != (after.average_rating, after.total_reviews, after.total_ratings):
                    movies_fixed += 1

            users_fixed = 0
            user_ids = self.db.execute(select(UserModel.user_id)).scalars().all()
            for user_id in user_ids:
                user = self.db.get(UserModel, user_id)
                before = (Decimal(user.average_rating or 0), user.total_reviews)
                after = self.recalculate_user_rating(user_id)
                if before != (after.average_rating, after.total_reviews):
                    users_fixed += 1

            self.db.commit()

            if movies_fixed or users_fixed:
                logger.warning(
                    f"집계 불일치 보정 완료 movies={movies_fixed} users={users_fixed}"
                )
            return {
                "movies_checked": len(movie_ids),
                "movies_fixed": movies_fixed,
                "users_checked": len(user_ids),
                "users_fixed": users_fixed,
            }

        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageFailureException(f"집계 재계산 실패: {str(e)}") from e

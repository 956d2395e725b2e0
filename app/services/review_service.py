# app/services/review_service.py

import logging
from typing import Dict, List, Optional, Tuple
from sqlalchemy.orm import Session
from sqlalchemy import select, func, and_, asc, desc
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from app.models.movie import MovieModel
from app.models.user import UserModel
from app.models.review import ReviewModel
from app.models.review_reaction import ReviewReactionModel, ReactionType as ReactionTypeModel
from app.schemas.movie import MovieSummary, SortOrder
from app.schemas.review import (
    Review,
    ReviewCreate,
    ReviewUpdate,
    ReactionType,
    ReviewSortField,
    ReviewListResponse,
    ReviewMutationResponse,
)
from app.schemas.common import Pagination, page_offset
from app.services.rating_service import RatingService
from app.core.exceptions import (
    MovieReviewException,
    NotFoundException,
    DuplicateReviewException,
    NotAuthorizedException,
    SelfReactionException,
    StorageFailureException,
)

logger = logging.getLogger(__name__)

REACTION_ATTEMPTS = 2


class ReviewService:
    """리뷰 작성/수정/삭제/반응. 리뷰 변경 후 같은 트랜잭션에서 집계를 다시 계산한다"""

    def __init__(self, db: Session, rating_service: Optional[RatingService] = None):
        self.db = db
        self.rating_service = rating_service or RatingService(db)

    # 조회

    async def get_movie_reviews(
        self,
        movie_id: str,
        page: int = 1,
        limit: int = 10,
        sort: ReviewSortField = ReviewSortField.created_at,
        order: SortOrder = SortOrder.desc,
    ) -> ReviewListResponse:
        try:
            if not self.db.get(MovieModel, movie_id):
                raise NotFoundException("영화를 찾을 수 없습니다")

            condition = ReviewModel.movie_id == movie_id
            stmt = (
                select(ReviewModel, UserModel.username, UserModel.profile_image_url)
                .join(UserModel, ReviewModel.user_id == UserModel.user_id)
                .where(condition)
                .order_by(*self._review_ordering(sort, order))
                .limit(limit)
                .offset(page_offset(page, limit))
            )
            rows = self.db.execute(stmt).all()
            total = self._count_reviews(condition)

            reactions = self._load_reactions([row[0].review_id for row in rows])
            reviews = [
                self._build_review_response(review, username, profile, reactions)
                for review, username, profile in rows
            ]
            return ReviewListResponse(reviews=reviews, pagination=Pagination.build(page, limit, total))

        except SQLAlchemyError as e:
            raise StorageFailureException(f"영화 리뷰 조회 실패: {str(e)}") from e

    async def get_user_reviews(self, user_id: str, page: int = 1, limit: int = 10) -> ReviewListResponse:
        try:
            user = self.db.get(UserModel, user_id)
            if not user:
                raise NotFoundException("사용자를 찾을 수 없습니다")

            condition = ReviewModel.user_id == user_id
            stmt = (
                select(ReviewModel, MovieModel)
                .join(MovieModel, ReviewModel.movie_id == MovieModel.movie_id)
                .where(condition)
                .order_by(desc(ReviewModel.created_at), desc(ReviewModel.review_id))
                .limit(limit)
                .offset(page_offset(page, limit))
            )
            rows = self.db.execute(stmt).all()
            total = self._count_reviews(condition)

            reactions = self._load_reactions([row[0].review_id for row in rows])
            reviews = [
                self._build_review_response(
                    review, user.username, user.profile_image_url, reactions, movie=movie
                )
                for review, movie in rows
            ]
            return ReviewListResponse(reviews=reviews, pagination=Pagination.build(page, limit, total))

        except SQLAlchemyError as e:
            raise StorageFailureException(f"사용자 리뷰 조회 실패: {str(e)}") from e

    async def get_review(self, review_id: str) -> Review:
        try:
            review = self.db.get(ReviewModel, review_id)
            if not review:
                raise NotFoundException("리뷰를 찾을 수 없습니다")
            return self._review_with_author(review)
        except SQLAlchemyError as e:
            raise StorageFailureException(f"리뷰 조회 실패: {str(e)}") from e

    # 변경

    async def create_review(self, user_id: str, review_data: ReviewCreate) -> ReviewMutationResponse:
        try:
            # 영화 존재 확인 (집계 대상 행 잠금)
            movie = self.rating_service.lock_movie(review_data.movie_id)
            if not movie:
                raise NotFoundException("영화를 찾을 수 없습니다")

            if self._find_user_review(user_id, review_data.movie_id):
                raise DuplicateReviewException()

            review = ReviewModel(
                user_id=user_id,
                movie_id=review_data.movie_id,
                rating=review_data.rating,
                review_text=review_data.review_text,
                spoiler=review_data.spoiler,
            )
            self.db.add(review)
            self.db.flush()

            movie_rating = self.rating_service.recalculate_movie_rating(review.movie_id)
            user_rating = self.rating_service.recalculate_user_rating(user_id)

            self.db.commit()
            self.db.refresh(review)
            logger.info(f"리뷰 작성 review_id={review.review_id} movie_id={review.movie_id}")

            return ReviewMutationResponse(
                message="리뷰가 등록되었습니다",
                review=self._review_with_author(review),
                movie_rating=movie_rating,
                user_rating=user_rating,
            )

        except MovieReviewException:
            self.db.rollback()
            raise
        except IntegrityError as e:
            # 동시 요청으로 unique 제약에 걸린 경우
            self.db.rollback()
            raise DuplicateReviewException() from e
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageFailureException(f"리뷰 작성 실패: {str(e)}") from e

    async def update_review(
        self, review_id: str, user_id: str, review_data: ReviewUpdate
    ) -> ReviewMutationResponse:
        try:
            review = self.db.get(ReviewModel, review_id)
            if not review:
                raise NotFoundException("리뷰를 찾을 수 없습니다")
            if review.user_id != user_id:
                raise NotAuthorizedException("본인의 리뷰만 수정할 수 있습니다")

            self.rating_service.lock_movie(review.movie_id)

            rating_changed = False
            if review_data.rating is not None and review_data.rating != review.rating:
                review.rating = review_data.rating
                rating_changed = True
            if review_data.review_text is not None:
                review.review_text = review_data.review_text
            if review_data.spoiler is not None:
                review.spoiler = review_data.spoiler
            self.db.flush()

            # 수정은 항상 전체 리뷰로 영화 집계를 다시 계산
            movie_rating = self.rating_service.recalculate_movie_rating(review.movie_id)
            user_rating = None
            if rating_changed:
                user_rating = self.rating_service.recalculate_user_rating(user_id)

            self.db.commit()
            self.db.refresh(review)

            return ReviewMutationResponse(
                message="리뷰가 수정되었습니다",
                review=self._review_with_author(review),
                movie_rating=movie_rating,
                user_rating=user_rating,
            )

        except MovieReviewException:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageFailureException(f"리뷰 수정 실패: {str(e)}") from e

    async def delete_review(self, review_id: str, user_id: str) -> ReviewMutationResponse:
        try:
            review = self.db.get(ReviewModel, review_id)
            if not review:
                raise NotFoundException("리뷰를 찾을 수 없습니다")
            if review.user_id != user_id:
                raise NotAuthorizedException("본인의 리뷰만 삭제할 수 있습니다")

            movie_id = review.movie_id
            self.rating_service.lock_movie(movie_id)

            # 관련 반응도 함께 삭제
            self.db.execute(
                ReviewReactionModel.__table__.delete().where(
                    ReviewReactionModel.review_id == review_id
                )
            )
            self.db.delete(review)
            self.db.flush()

            movie_rating = self.rating_service.recalculate_movie_rating(movie_id)
            user_rating = self.rating_service.recalculate_user_rating(user_id)

            self.db.commit()
            logger.info(f"리뷰 삭제 review_id={review_id} movie_id={movie_id}")

            return ReviewMutationResponse(
                message="리뷰가 삭제되었습니다",
                movie_rating=movie_rating,
                user_rating=user_rating,
            )

        except MovieReviewException:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageFailureException(f"리뷰 삭제 실패: {str(e)}") from e

    async def toggle_reaction(
        self, review_id: str, user_id: str, reaction_type: ReactionType
    ) -> Review:
        """좋아요/싫어요 토글. 같은 반응이면 취소, 다른 반응이면 전환. 집계에는 영향 없음

        동시에 들어온 요청이 먼저 반응을 넣어 기본키 충돌이 나면 다시 읽어서 한 번 더 적용한다.
        """
        for attempt in range(REACTION_ATTEMPTS):
            try:
                return self._apply_reaction(review_id, user_id, ReactionTypeModel(reaction_type.value))

            except MovieReviewException:
                self.db.rollback()
                raise
            except IntegrityError as e:
                self.db.rollback()
                if attempt + 1 == REACTION_ATTEMPTS:
                    raise StorageFailureException(f"리뷰 반응 처리 실패: {str(e)}") from e
                logger.info(f"리뷰 반응 충돌, 재시도 review_id={review_id} user_id={user_id}")
            except SQLAlchemyError as e:
                self.db.rollback()
                raise StorageFailureException(f"리뷰 반응 처리 실패: {str(e)}") from e

    def _apply_reaction(self, review_id: str, user_id: str, reaction: ReactionTypeModel) -> Review:
        review = self.db.get(ReviewModel, review_id)
        if not review:
            raise NotFoundException("리뷰를 찾을 수 없습니다")
        if review.user_id == user_id:
            raise SelfReactionException()

        existing = self._find_reaction(review_id, user_id)
        if existing and existing.reaction == reaction:
            self.db.delete(existing)
        elif existing:
            existing.reaction = reaction
        else:
            self.db.add(ReviewReactionModel(review_id=review_id, user_id=user_id, reaction=reaction))

        self.db.commit()
        return self._review_with_author(review)

    # 내부 헬퍼

    def _find_reaction(self, review_id: str, user_id: str) -> Optional[ReviewReactionModel]:
        stmt = select(ReviewReactionModel).where(
            and_(
                ReviewReactionModel.review_id == review_id,
                ReviewReactionModel.user_id == user_id,
            )
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def _find_user_review(self, user_id: str, movie_id: str) -> Optional[ReviewModel]:
        stmt = select(ReviewModel).where(
            and_(ReviewModel.user_id == user_id, ReviewModel.movie_id == movie_id)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def _count_reviews(self, condition) -> int:
        stmt = select(func.count(ReviewModel.review_id)).where(condition)
        return self.db.execute(stmt).scalar() or 0

    def _review_ordering(self, sort: ReviewSortField, order: SortOrder) -> list:
        direction = asc if order == SortOrder.asc else desc
        if sort == ReviewSortField.helpful:
            key = (
                select(func.count(ReviewReactionModel.user_id))
                .where(
                    and_(
                        ReviewReactionModel.review_id == ReviewModel.review_id,
                        ReviewReactionModel.reaction == ReactionTypeModel.like,
                    )
                )
                .correlate(ReviewModel)
                .scalar_subquery()
            )
        elif sort == ReviewSortField.rating:
            key = ReviewModel.rating
        else:
            key = ReviewModel.created_at
        return [direction(key), direction(ReviewModel.created_at), direction(ReviewModel.review_id)]

    def _load_reactions(self, review_ids: List[str]) -> Dict[str, Tuple[List[str], List[str]]]:
        """리뷰별 (좋아요 사용자, 싫어요 사용자) 목록"""
        reactions: Dict[str, Tuple[List[str], List[str]]] = {
            review_id: ([], []) for review_id in review_ids
        }
        if not review_ids:
            return reactions

        stmt = (
            select(ReviewReactionModel.review_id, ReviewReactionModel.user_id, ReviewReactionModel.reaction)
            .where(ReviewReactionModel.review_id.in_(review_ids))
            .order_by(ReviewReactionModel.created_at, ReviewReactionModel.user_id)
        )
        for review_id, reactor_id, reaction in self.db.execute(stmt).all():
            likes, dislikes = reactions[review_id]
            if reaction == ReactionTypeModel.like:
                likes.append(reactor_id)
            else:
                dislikes.append(reactor_id)
        return reactions

    def _review_with_author(self, review: ReviewModel) -> Review:
        author = self.db.get(UserModel, review.user_id)
        reactions = self._load_reactions([review.review_id])
        return self._build_review_response(
            review,
            author.username if author else None,
            author.profile_image_url if author else None,
            reactions,
        )

    def _build_review_response(
        self,
        review: ReviewModel,
        username: Optional[str],
        user_profile_image: Optional[str],
        reactions: Dict[str, Tuple[List[str], List[str]]],
        movie: Optional[MovieModel] = None,
    ) -> Review:
        likes, dislikes = reactions.get(review.review_id, ([], []))
        return Review(
            review_id=review.review_id,
            user_id=review.user_id,
            movie_id=review.movie_id,
            rating=review.rating,
            review_text=review.review_text,
            spoiler=review.spoiler,
            likes=likes,
            dislikes=dislikes,
            likes_count=len(likes),
            dislikes_count=len(dislikes),
            created_at=review.created_at,
            updated_at=review.updated_at,
            username=username,
            user_profile_image=user_profile_image,
            movie=MovieSummary.from_orm(movie) if movie else None,
        )

# app/services/user_service.py

import logging
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional
from sqlalchemy.orm import Session
from sqlalchemy import select, func, desc, asc
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from app.models.user import UserModel
from app.models.review import ReviewModel
from app.models.review_reaction import ReviewReactionModel, ReactionType
from app.models.movie_genre import MovieGenreModel
from app.schemas.user import (
    User,
    UserPrivate,
    UserCreateEmail,
    UserProfileUpdate,
    UserProfileUpdateResponse,
    UserListResponse,
    UserStats,
    GenreStat,
)
from app.schemas.common import Pagination, page_offset
from app.services.rating_service import compute_average, ONE_DECIMAL
from app.core.auth import get_password_hash, verify_password
from app.core.exceptions import (
    MovieReviewException,
    NotFoundException,
    NotAuthorizedException,
    DuplicateUserException,
    StorageFailureException,
)

logger = logging.getLogger(__name__)

TOP_GENRES_LIMIT = 5


class UserService:

    def __init__(self, db: Session):
        self.db = db

    async def get_user_by_email(self, email: str) -> Optional[UserModel]:
        try:
            stmt = select(UserModel).where(UserModel.email == email.lower())
            return self.db.execute(stmt).scalar_one_or_none()
        except SQLAlchemyError as e:
            raise StorageFailureException(f"사용자 조회 실패: {str(e)}") from e

    async def get_user_by_id(self, user_id: str) -> Optional[UserModel]:
        """ID로 사용자 조회"""
        try:
            return self.db.get(UserModel, user_id)
        except SQLAlchemyError as e:
            raise StorageFailureException(f"사용자 조회 실패: {str(e)}") from e

    async def get_user_profile(self, user_id: str) -> User:
        user = await self.get_user_by_id(user_id)
        if not user:
            raise NotFoundException("사용자를 찾을 수 없습니다")
        return User.from_orm(user)

    async def create_user_email(self, user_data: UserCreateEmail) -> UserPrivate:
        try:
            email = user_data.email.lower()

            # 이메일 / 사용자 이름 중복 체크
            if await self.get_user_by_email(email):
                raise DuplicateUserException("이미 등록된 이메일입니다")
            if self._find_by_username(user_data.username):
                raise DuplicateUserException("이미 사용 중인 사용자 이름입니다")

            user_model = UserModel(
                email=email,
                username=user_data.username,
                password_hash=get_password_hash(user_data.password),
                profile_image_url=user_data.profile_image_url,
            )

            self.db.add(user_model)
            self.db.commit()
            self.db.refresh(user_model)

            logger.info(f"회원가입 user_id={user_model.user_id}")
            return UserPrivate.from_orm(user_model)

        except MovieReviewException:
            self.db.rollback()
            raise
        except IntegrityError as e:
            self.db.rollback()
            raise DuplicateUserException("이미 등록된 사용자입니다") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageFailureException(f"이메일 회원가입 실패: {str(e)}") from e

    async def authenticate_user_email(self, email: str, password: str) -> Optional[UserPrivate]:
        try:
            user_model = await self.get_user_by_email(email)
            if not user_model or not verify_password(password, user_model.password_hash):
                return None

            # 마지막 로그인 시간 업데이트
            user_model.last_login = datetime.utcnow()
            self.db.commit()

            return UserPrivate.from_orm(user_model)

        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageFailureException(f"이메일 로그인 실패: {str(e)}") from e

    async def search_users(self, query: str, page: int = 1, limit: int = 10) -> UserListResponse:
        """사용자 이름 검색 (리뷰 많은 순)"""
        try:
            condition = UserModel.username.ilike(f"%{query.strip()}%")
            stmt = (
                select(UserModel)
                .where(condition)
                .order_by(desc(UserModel.total_reviews), desc(UserModel.average_rating), asc(UserModel.username))
                .limit(limit)
                .offset(page_offset(page, limit))
            )
            users = self.db.execute(stmt).scalars().all()
            total = self.db.execute(select(func.count(UserModel.user_id)).where(condition)).scalar() or 0

            return UserListResponse(
                users=[User.from_orm(user) for user in users],
                pagination=Pagination.build(page, limit, total),
            )

        except SQLAlchemyError as e:
            raise StorageFailureException(f"사용자 검색 실패: {str(e)}") from e

    async def update_profile(
        self, user_id: str, current_user_id: str, update_data: UserProfileUpdate
    ) -> UserProfileUpdateResponse:
        """본인 프로필 수정"""
        try:
            if user_id != current_user_id:
                raise NotAuthorizedException("본인의 프로필만 수정할 수 있습니다")

            user_model = self.db.get(UserModel, user_id)
            if not user_model:
                raise NotFoundException("사용자를 찾을 수 없습니다")

            updated_fields = []
            if update_data.username and update_data.username != user_model.username:
                existing = self._find_by_username(update_data.username)
                if existing and existing.user_id != user_id:
                    raise DuplicateUserException("이미 사용 중인 사용자 이름입니다")
                user_model.username = update_data.username
                updated_fields.append("username")

            if update_data.bio is not None:
                user_model.bio = update_data.bio
                updated_fields.append("bio")

            if update_data.profile_image_url is not None:
                user_model.profile_image_url = update_data.profile_image_url
                updated_fields.append("profile_image_url")

            self.db.commit()
            self.db.refresh(user_model)

            return UserProfileUpdateResponse(
                message="프로필이 수정되었습니다",
                updated_fields=updated_fields,
                user=UserPrivate.from_orm(user_model),
            )

        except MovieReviewException:
            self.db.rollback()
            raise
        except IntegrityError as e:
            self.db.rollback()
            raise DuplicateUserException("이미 사용 중인 사용자 이름입니다") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageFailureException(f"프로필 수정 실패: {str(e)}") from e

    async def get_user_stats(self, user_id: str) -> UserStats:
        """사용자 리뷰 통계"""
        try:
            user_model = self.db.get(UserModel, user_id)
            if not user_model:
                raise NotFoundException("사용자를 찾을 수 없습니다")

            ratings = (
                self.db.execute(select(ReviewModel.rating).where(ReviewModel.user_id == user_id))
                .scalars()
                .all()
            )

            # 받은 좋아요 / 싫어요 수
            reaction_stmt = (
                select(ReviewReactionModel.reaction, func.count(ReviewReactionModel.user_id))
                .join(ReviewModel, ReviewReactionModel.review_id == ReviewModel.review_id)
                .where(ReviewModel.user_id == user_id)
                .group_by(ReviewReactionModel.reaction)
            )
            reaction_counts = dict(self.db.execute(reaction_stmt).all())

            return UserStats(
                user_id=user_id,
                total_reviews=len(ratings),
                average_rating=compute_average(ratings),
                total_likes=reaction_counts.get(ReactionType.like, 0),
                total_dislikes=reaction_counts.get(ReactionType.dislike, 0),
                top_genres=self._get_top_genres(user_id),
                join_date=user_model.created_at,
            )

        except SQLAlchemyError as e:
            raise StorageFailureException(f"사용자 통계 조회 실패: {str(e)}") from e

    def _get_top_genres(self, user_id: str) -> list:
        review_count = func.count(ReviewModel.review_id)
        stmt = (
            select(MovieGenreModel.genre, review_count, func.sum(ReviewModel.rating))
            .join(ReviewModel, ReviewModel.movie_id == MovieGenreModel.movie_id)
            .where(ReviewModel.user_id == user_id)
            .group_by(MovieGenreModel.genre)
            .order_by(desc(review_count), asc(MovieGenreModel.genre))
            .limit(TOP_GENRES_LIMIT)
        )
        return [
            GenreStat(
                genre=genre,
                count=count,
                average_rating=(Decimal(total) / Decimal(count)).quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP),
            )
            for genre, count, total in self.db.execute(stmt).all()
        ]

    def _find_by_username(self, username: str) -> Optional[UserModel]:
        stmt = select(UserModel).where(func.lower(UserModel.username) == username.lower())
        return self.db.execute(stmt).scalar_one_or_none()

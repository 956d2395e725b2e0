# app/services/watchlist_service.py

import logging
from typing import Optional
from sqlalchemy.orm import Session
from sqlalchemy import select, func, and_, desc, asc
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from app.models.movie import MovieModel
from app.models.movie_genre import MovieGenreModel
from app.models.watchlist import WatchlistModel, WatchlistPriority as WatchlistPriorityModel
from app.schemas.movie import MovieSummary
from app.schemas.watchlist import (
    WatchlistItem,
    WatchlistCreate,
    WatchlistUpdate,
    WatchlistPriority,
    WatchlistListResponse,
    WatchlistCheck,
    WatchlistStats,
    PriorityCount,
    GenreCount,
)
from app.schemas.common import Pagination, page_offset
from app.core.exceptions import (
    MovieReviewException,
    NotFoundException,
    NotAuthorizedException,
    DuplicateWatchlistItemException,
    StorageFailureException,
)

logger = logging.getLogger(__name__)

TOP_GENRES_LIMIT = 5


class WatchlistService:
    """왓치리스트 관리. 리뷰 집계와는 무관"""

    def __init__(self, db: Session):
        self.db = db

    async def get_user_watchlist(
        self,
        user_id: str,
        page: int = 1,
        limit: int = 10,
        priority: Optional[WatchlistPriority] = None,
    ) -> WatchlistListResponse:
        """사용자 왓치리스트 조회"""
        try:
            conditions = [WatchlistModel.user_id == user_id]
            if priority:
                conditions.append(WatchlistModel.priority == WatchlistPriorityModel(priority.value))

            stmt = (
                select(WatchlistModel, MovieModel)
                .join(MovieModel, MovieModel.movie_id == WatchlistModel.movie_id)
                .where(*conditions)
                .order_by(desc(WatchlistModel.date_added), desc(WatchlistModel.item_id))
                .limit(limit)
                .offset(page_offset(page, limit))
            )
            rows = self.db.execute(stmt).all()
            total = (
                self.db.execute(select(func.count(WatchlistModel.item_id)).where(*conditions)).scalar()
                or 0
            )

            return WatchlistListResponse(
                watchlist=[self._build_item(item, movie) for item, movie in rows],
                pagination=Pagination.build(page, limit, total),
            )

        except SQLAlchemyError as e:
            raise StorageFailureException(f"왓치리스트 조회 실패: {str(e)}") from e

    async def add_to_watchlist(self, user_id: str, item_data: WatchlistCreate) -> WatchlistItem:
        """왓치리스트에 영화 추가"""
        try:
            # 영화 존재 확인
            movie = self.db.get(MovieModel, item_data.movie_id)
            if not movie:
                raise NotFoundException("영화를 찾을 수 없습니다")

            # 이미 왓치리스트에 있는지 확인
            if self._find_item_by_movie(user_id, item_data.movie_id):
                raise DuplicateWatchlistItemException()

            item = WatchlistModel(
                user_id=user_id,
                movie_id=item_data.movie_id,
                priority=WatchlistPriorityModel(item_data.priority.value),
                notes=item_data.notes,
            )
            self.db.add(item)
            self.db.commit()
            self.db.refresh(item)
            logger.info(f"왓치리스트 추가 user_id={user_id} movie_id={item.movie_id}")

            return self._build_item(item, movie)

        except MovieReviewException:
            self.db.rollback()
            raise
        except IntegrityError as e:
            self.db.rollback()
            raise DuplicateWatchlistItemException() from e
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageFailureException(f"왓치리스트 추가 실패: {str(e)}") from e

    async def update_item(self, item_id: str, user_id: str, update_data: WatchlistUpdate) -> WatchlistItem:
        """우선순위 / 메모 수정"""
        try:
            item = self._get_owned_item(item_id, user_id, "수정")

            if update_data.priority is not None:
                item.priority = WatchlistPriorityModel(update_data.priority.value)
            if update_data.notes is not None:
                item.notes = update_data.notes

            self.db.commit()
            self.db.refresh(item)
            return self._build_item(item, self.db.get(MovieModel, item.movie_id))

        except MovieReviewException:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageFailureException(f"왓치리스트 수정 실패: {str(e)}") from e

    async def remove_item(self, item_id: str, user_id: str) -> bool:
        """항목 ID로 왓치리스트에서 제거"""
        try:
            item = self._get_owned_item(item_id, user_id, "삭제")
            self.db.delete(item)
            self.db.commit()
            return True

        except MovieReviewException:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageFailureException(f"왓치리스트 제거 실패: {str(e)}") from e

    async def remove_movie(self, user_id: str, movie_id: str) -> bool:
        """영화 ID로 왓치리스트에서 제거"""
        try:
            item = self._find_item_by_movie(user_id, movie_id)
            if not item:
                raise NotFoundException("왓치리스트에서 영화를 찾을 수 없습니다")

            self.db.delete(item)
            self.db.commit()
            return True

        except MovieReviewException:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageFailureException(f"왓치리스트 제거 실패: {str(e)}") from e

    async def check_movie(self, user_id: str, movie_id: str) -> WatchlistCheck:
        try:
            item = self._find_item_by_movie(user_id, movie_id)
            if not item:
                return WatchlistCheck(in_watchlist=False)
            return WatchlistCheck(
                in_watchlist=True,
                watchlist_item=self._build_item(item, self.db.get(MovieModel, movie_id)),
            )
        except SQLAlchemyError as e:
            raise StorageFailureException(f"왓치리스트 확인 실패: {str(e)}") from e

    async def get_stats(self, user_id: str) -> WatchlistStats:
        """왓치리스트 통계 (우선순위 분포, 장르 TOP 5)"""
        try:
            total = (
                self.db.execute(
                    select(func.count(WatchlistModel.item_id)).where(WatchlistModel.user_id == user_id)
                ).scalar()
                or 0
            )

            priority_stmt = (
                select(WatchlistModel.priority, func.count(WatchlistModel.item_id))
                .where(WatchlistModel.user_id == user_id)
                .group_by(WatchlistModel.priority)
            )
            priority_distribution = [
                PriorityCount(priority=WatchlistPriority(priority.value), count=count)
                for priority, count in self.db.execute(priority_stmt).all()
            ]

            genre_count = func.count(WatchlistModel.item_id)
            genre_stmt = (
                select(MovieGenreModel.genre, genre_count)
                .join(WatchlistModel, WatchlistModel.movie_id == MovieGenreModel.movie_id)
                .where(WatchlistModel.user_id == user_id)
                .group_by(MovieGenreModel.genre)
                .order_by(desc(genre_count), asc(MovieGenreModel.genre))
                .limit(TOP_GENRES_LIMIT)
            )
            top_genres = [
                GenreCount(genre=genre, count=count)
                for genre, count in self.db.execute(genre_stmt).all()
            ]

            return WatchlistStats(
                total_items=total,
                priority_distribution=priority_distribution,
                top_genres=top_genres,
            )

        except SQLAlchemyError as e:
            raise StorageFailureException(f"왓치리스트 통계 조회 실패: {str(e)}") from e

    def _get_owned_item(self, item_id: str, user_id: str, action: str) -> WatchlistModel:
        item = self.db.get(WatchlistModel, item_id)
        if not item:
            raise NotFoundException("왓치리스트 항목을 찾을 수 없습니다")
        if item.user_id != user_id:
            raise NotAuthorizedException(f"본인의 왓치리스트 항목만 {action}할 수 있습니다")
        return item

    def _find_item_by_movie(self, user_id: str, movie_id: str) -> Optional[WatchlistModel]:
        stmt = select(WatchlistModel).where(
            and_(WatchlistModel.user_id == user_id, WatchlistModel.movie_id == movie_id)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def _build_item(self, item: WatchlistModel, movie: Optional[MovieModel]) -> WatchlistItem:
        return WatchlistItem(
            item_id=item.item_id,
            user_id=item.user_id,
            movie_id=item.movie_id,
            priority=WatchlistPriority(item.priority.value),
            notes=item.notes,
            date_added=item.date_added,
            movie=MovieSummary.from_orm(movie) if movie else None,
        )

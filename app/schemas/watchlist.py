# app/schemas/watchlist.py

from typing import List, Optional
from datetime import datetime
from enum import Enum
from pydantic import BaseModel, Field
from app.schemas.common import OBJECT_ID_PATTERN, Pagination
from app.schemas.movie import MovieSummary


class WatchlistPriority(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


class WatchlistItem(BaseModel):
    item_id: str = Field(description="왓치리스트 항목 ID")
    user_id: str = Field(description="사용자 ID")
    movie_id: str = Field(description="영화 ID")
    priority: WatchlistPriority = Field(description="우선순위")
    notes: Optional[str] = Field(default=None, description="메모")
    date_added: Optional[datetime] = Field(default=None, description="추가일")
    movie: Optional[MovieSummary] = Field(default=None, description="영화 요약")

    class Config:
        from_attributes = True


class WatchlistCreate(BaseModel):
    movie_id: str = Field(description="영화 ID", pattern=OBJECT_ID_PATTERN)
    priority: WatchlistPriority = Field(default=WatchlistPriority.medium, description="우선순위")
    notes: Optional[str] = Field(default=None, description="메모", max_length=500)


class WatchlistUpdate(BaseModel):
    priority: Optional[WatchlistPriority] = Field(default=None, description="우선순위")
    notes: Optional[str] = Field(default=None, description="메모", max_length=500)


class WatchlistListResponse(BaseModel):
    watchlist: List[WatchlistItem] = Field(description="왓치리스트")
    pagination: Pagination = Field(description="페이지 정보")


class WatchlistCheck(BaseModel):
    in_watchlist: bool = Field(description="왓치리스트 포함 여부")
    watchlist_item: Optional[WatchlistItem] = Field(default=None, description="왓치리스트 항목")


class PriorityCount(BaseModel):
    priority: WatchlistPriority = Field(description="우선순위")
    count: int = Field(description="항목 수")


class GenreCount(BaseModel):
    genre: str = Field(description="장르")
    count: int = Field(description="항목 수")


class WatchlistStats(BaseModel):
    total_items: int = Field(description="전체 항목 수")
    priority_distribution: List[PriorityCount] = Field(description="우선순위 분포")
    top_genres: List[GenreCount] = Field(description="장르 TOP 5")

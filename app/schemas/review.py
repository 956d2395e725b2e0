# app/schemas/review.py

from typing import List, Optional
from datetime import datetime
from decimal import Decimal
from enum import Enum
from pydantic import BaseModel, Field, field_validator
from app.schemas.common import OBJECT_ID_PATTERN, Pagination
from app.schemas.movie import MovieSummary, SortOrder


class ReactionType(str, Enum):
    like = "like"
    dislike = "dislike"


class ReviewSortField(str, Enum):
    rating = "rating"
    created_at = "created_at"
    helpful = "helpful"


def _strip(v):
    return v.strip() if isinstance(v, str) else v


class Review(BaseModel):
    review_id: str = Field(description="리뷰 ID")
    user_id: str = Field(description="작성자 ID")
    movie_id: str = Field(description="영화 ID")
    rating: int = Field(description="평점 (1 ~ 5)")
    review_text: str = Field(description="리뷰 내용")
    spoiler: bool = Field(default=False, description="스포일러 여부")
    likes: List[str] = Field(default_factory=list, description="좋아요한 사용자 ID")
    dislikes: List[str] = Field(default_factory=list, description="싫어요한 사용자 ID")
    likes_count: int = Field(default=0, description="좋아요 수")
    dislikes_count: int = Field(default=0, description="싫어요 수")
    created_at: Optional[datetime] = Field(default=None, description="작성일시")
    updated_at: Optional[datetime] = Field(default=None, description="수정일시")

    # 작성자 정보 (조회시 포함)
    username: Optional[str] = Field(default=None, description="작성자 이름")
    user_profile_image: Optional[str] = Field(default=None, description="작성자 프로필 이미지")

    # 영화 정보 (사용자별 조회시 포함)
    movie: Optional[MovieSummary] = Field(default=None, description="영화 요약")

    class Config:
        from_attributes = True


class ReviewCreate(BaseModel):
    movie_id: str = Field(description="영화 ID", pattern=OBJECT_ID_PATTERN)
    rating: int = Field(description="평점 (1 ~ 5)", ge=1, le=5)
    review_text: str = Field(description="리뷰 내용", min_length=10, max_length=2000)
    spoiler: bool = Field(default=False, description="스포일러 여부")

    strip_review_text = field_validator("review_text", mode="before")(_strip)


class ReviewUpdate(BaseModel):
    rating: Optional[int] = Field(default=None, description="평점 (1 ~ 5)", ge=1, le=5)
    review_text: Optional[str] = Field(
        default=None, description="리뷰 내용", min_length=10, max_length=2000
    )
    spoiler: Optional[bool] = Field(default=None, description="스포일러 여부")

    strip_review_text = field_validator("review_text", mode="before")(_strip)


class ReactionRequest(BaseModel):
    reaction_type: ReactionType = Field(description="반응 종류 (like / dislike)")


class RatingAggregate(BaseModel):
    """영화 또는 사용자의 리뷰 집계 값"""

    scope_id: str = Field(description="집계 대상 ID")
    average_rating: Decimal = Field(description="평균 평점")
    total_reviews: int = Field(description="리뷰 수")
    total_ratings: Optional[int] = Field(default=None, description="평점 수 (영화만)")


class ReviewMutationResponse(BaseModel):
    message: str = Field(description="처리 결과 메시지")
    review: Optional[Review] = Field(default=None, description="리뷰")
    movie_rating: Optional[RatingAggregate] = Field(default=None, description="영화 집계")
    user_rating: Optional[RatingAggregate] = Field(default=None, description="사용자 집계")


class ReviewListResponse(BaseModel):
    reviews: List[Review] = Field(description="리뷰 목록")
    pagination: Pagination = Field(description="페이지 정보")

# app/schemas/user.py

from typing import List, Optional
from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, Field
from app.schemas.common import Pagination

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
USERNAME_PATTERN = r"^[a-zA-Z0-9_]+$"


class User(BaseModel):
    user_id: str = Field(description="사용자 ID")
    username: str = Field(description="사용자 이름")
    profile_image_url: Optional[str] = Field(default=None, description="프로필 이미지 URL")
    bio: Optional[str] = Field(default=None, description="자기소개")
    total_reviews: int = Field(default=0, description="작성한 리뷰 수")
    average_rating: Decimal = Field(default=Decimal("0"), description="작성한 리뷰 평균 평점")
    created_at: Optional[datetime] = Field(default=None, description="가입일시")

    class Config:
        from_attributes = True


class UserPrivate(User):
    """본인만 조회 가능한 정보 포함"""

    email: str = Field(description="이메일")
    is_admin: bool = Field(default=False, description="관리자 여부")
    last_login: Optional[datetime] = Field(default=None, description="마지막 로그인")


class UserCreateEmail(BaseModel):
    email: str = Field(description="이메일", pattern=EMAIL_PATTERN, max_length=255)
    username: str = Field(description="사용자 이름", min_length=3, max_length=30, pattern=USERNAME_PATTERN)
    password: str = Field(description="비밀번호", min_length=6, max_length=72)
    profile_image_url: Optional[str] = Field(default=None, description="프로필 이미지 URL")


class UserLoginEmail(BaseModel):
    email: str = Field(description="이메일")
    password: str = Field(description="비밀번호")


class TokenResponse(BaseModel):
    access_token: str = Field(description="액세스 토큰")
    token_type: str = Field(default="bearer", description="토큰 타입")
    user: UserPrivate = Field(description="사용자 정보")


class UserProfileUpdate(BaseModel):
    """사용자 프로필 수정 요청"""

    username: Optional[str] = Field(
        None, min_length=3, max_length=30, pattern=USERNAME_PATTERN, description="변경할 사용자 이름"
    )
    bio: Optional[str] = Field(None, max_length=500, description="자기소개")
    profile_image_url: Optional[str] = Field(None, description="프로필 이미지 URL")


class UserProfileUpdateResponse(BaseModel):
    """사용자 프로필 수정 응답"""

    message: str
    updated_fields: List[str]
    user: UserPrivate


class UserListResponse(BaseModel):
    users: List[User] = Field(description="사용자 목록")
    pagination: Pagination = Field(description="페이지 정보")


class GenreStat(BaseModel):
    genre: str = Field(description="장르")
    count: int = Field(description="리뷰 수")
    average_rating: Optional[Decimal] = Field(default=None, description="해당 장르 평균 평점")


class UserStats(BaseModel):
    """사용자 리뷰 통계"""

    user_id: str = Field(description="사용자 ID")
    total_reviews: int = Field(description="작성한 리뷰 수")
    average_rating: Decimal = Field(description="평균 평점")
    total_likes: int = Field(description="받은 좋아요 수")
    total_dislikes: int = Field(description="받은 싫어요 수")
    top_genres: List[GenreStat] = Field(default_factory=list, description="많이 리뷰한 장르 TOP 5")
    join_date: Optional[datetime] = Field(default=None, description="가입일시")

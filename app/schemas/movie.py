# app/schemas/movie.py

from typing import List, Optional
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from pydantic import BaseModel, Field, HttpUrl, field_validator
from app.schemas.common import Pagination

MIN_RELEASE_YEAR = 1888


class Genre(str, Enum):
    action = "Action"
    adventure = "Adventure"
    animation = "Animation"
    biography = "Biography"
    comedy = "Comedy"
    crime = "Crime"
    documentary = "Documentary"
    drama = "Drama"
    family = "Family"
    fantasy = "Fantasy"
    film_noir = "Film-Noir"
    history = "History"
    horror = "Horror"
    music = "Music"
    musical = "Musical"
    mystery = "Mystery"
    romance = "Romance"
    sci_fi = "Sci-Fi"
    sport = "Sport"
    thriller = "Thriller"
    war = "War"
    western = "Western"


SUPPORTED_LANGUAGES = [
    "English", "Spanish", "French", "German", "Italian", "Portuguese", "Russian",
    "Chinese", "Japanese", "Korean", "Arabic", "Hindi", "Bengali", "Turkish",
    "Dutch", "Swedish", "Norwegian", "Danish", "Finnish", "Polish", "Czech",
    "Hungarian", "Romanian", "Bulgarian", "Greek", "Hebrew", "Thai", "Vietnamese",
    "Indonesian", "Malay", "Filipino",
]


class MovieSortField(str, Enum):
    title = "title"
    release_year = "release_year"
    average_rating = "average_rating"
    total_reviews = "total_reviews"


class SortOrder(str, Enum):
    asc = "asc"
    desc = "desc"


def max_release_year() -> int:
    return date.today().year + 5


def _check_release_year(value: Optional[int]) -> Optional[int]:
    if value is not None and not MIN_RELEASE_YEAR <= value <= max_release_year():
        raise ValueError(f"개봉 연도는 {MIN_RELEASE_YEAR}년부터 {max_release_year()}년 사이여야 합니다")
    return value


def _clean_genres(genres: Optional[List[Genre]]) -> Optional[List[Genre]]:
    if genres is None:
        return None
    # 순서를 유지한 채 중복 제거
    unique = list(dict.fromkeys(genres))
    if not unique:
        raise ValueError("장르는 최소 한 개 이상이어야 합니다")
    return unique


def _clean_cast(cast: Optional[List[str]]) -> Optional[List[str]]:
    if cast is None:
        return None
    return [member.strip() for member in cast if member and member.strip()]


def _check_language(value: Optional[str]) -> Optional[str]:
    if value is not None and value not in SUPPORTED_LANGUAGES:
        raise ValueError("지원하지 않는 언어입니다")
    return value


class Movie(BaseModel):
    movie_id: str = Field(description="영화 ID")
    title: str = Field(description="영화 제목")
    genres: List[str] = Field(default_factory=list, description="장르 목록")
    release_year: int = Field(description="개봉 연도")
    director: str = Field(description="감독")
    cast: List[str] = Field(default_factory=list, description="출연진")
    synopsis: str = Field(description="줄거리")
    poster_url: str = Field(description="포스터 URL")
    trailer_url: Optional[str] = Field(default=None, description="트레일러 URL")
    runtime: Optional[int] = Field(default=None, description="상영시간(분)")
    formatted_runtime: Optional[str] = Field(default=None, description="상영시간 표시 문자열")
    language: str = Field(default="English", description="언어")
    country: str = Field(default="United States", description="제작 국가")
    average_rating: Decimal = Field(default=Decimal("0"), description="평균 평점 (0 ~ 5)")
    total_ratings: int = Field(default=0, description="평점 수")
    total_reviews: int = Field(default=0, description="리뷰 수")
    featured: bool = Field(default=False, description="추천 영화 여부")
    trending: bool = Field(default=False, description="트렌딩 영화 여부")
    imdb_rating: Optional[Decimal] = Field(default=None, description="IMDb 평점")
    box_office: Optional[int] = Field(default=None, description="박스오피스 수익")
    created_at: Optional[datetime] = Field(default=None, description="생성일시")
    updated_at: Optional[datetime] = Field(default=None, description="수정일시")

    class Config:
        from_attributes = True


class MovieSummary(BaseModel):
    """리뷰/왓치리스트에 포함되는 영화 요약"""

    movie_id: str = Field(description="영화 ID")
    title: str = Field(description="영화 제목")
    poster_url: str = Field(description="포스터 URL")
    release_year: int = Field(description="개봉 연도")
    director: Optional[str] = Field(default=None, description="감독")
    genres: List[str] = Field(default_factory=list, description="장르 목록")
    average_rating: Decimal = Field(description="평균 평점")

    class Config:
        from_attributes = True


class MovieCreate(BaseModel):
    title: str = Field(description="영화 제목", min_length=1, max_length=200)
    genres: List[Genre] = Field(description="장르 목록", min_length=1)
    release_year: int = Field(description="개봉 연도")
    director: str = Field(description="감독", min_length=1, max_length=255)
    cast: List[str] = Field(default_factory=list, description="출연진")
    synopsis: str = Field(description="줄거리", min_length=10, max_length=2000)
    poster_url: HttpUrl = Field(description="포스터 URL")
    trailer_url: Optional[HttpUrl] = Field(default=None, description="트레일러 URL")
    runtime: Optional[int] = Field(default=None, description="상영시간(분)", ge=1, le=600)
    language: str = Field(default="English", description="언어")
    country: str = Field(default="United States", description="제작 국가", max_length=100)
    featured: bool = Field(default=False, description="추천 영화 여부")
    trending: bool = Field(default=False, description="트렌딩 영화 여부")
    imdb_rating: Optional[Decimal] = Field(default=None, description="IMDb 평점", ge=0, le=10)
    box_office: Optional[int] = Field(default=None, description="박스오피스 수익", ge=0)

    @field_validator("title", "director", "synopsis", "country", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("release_year")
    @classmethod
    def check_release_year(cls, v):
        return _check_release_year(v)

    @field_validator("genres")
    @classmethod
    def clean_genres(cls, v):
        return _clean_genres(v)

    @field_validator("cast")
    @classmethod
    def clean_cast(cls, v):
        return _clean_cast(v)

    @field_validator("language")
    @classmethod
    def check_language(cls, v):
        return _check_language(v)


class MovieUpdate(BaseModel):
    title: Optional[str] = Field(default=None, description="영화 제목", min_length=1, max_length=200)
    genres: Optional[List[Genre]] = Field(default=None, description="장르 목록", min_length=1)
    release_year: Optional[int] = Field(default=None, description="개봉 연도")
    director: Optional[str] = Field(default=None, description="감독", min_length=1, max_length=255)
    cast: Optional[List[str]] = Field(default=None, description="출연진")
    synopsis: Optional[str] = Field(default=None, description="줄거리", min_length=10, max_length=2000)
    poster_url: Optional[HttpUrl] = Field(default=None, description="포스터 URL")
    trailer_url: Optional[HttpUrl] = Field(default=None, description="트레일러 URL")
    runtime: Optional[int] = Field(default=None, description="상영시간(분)", ge=1, le=600)
    language: Optional[str] = Field(default=None, description="언어")
    country: Optional[str] = Field(default=None, description="제작 국가", max_length=100)
    featured: Optional[bool] = Field(default=None, description="추천 영화 여부")
    trending: Optional[bool] = Field(default=None, description="트렌딩 영화 여부")
    imdb_rating: Optional[Decimal] = Field(default=None, description="IMDb 평점", ge=0, le=10)
    box_office: Optional[int] = Field(default=None, description="박스오피스 수익", ge=0)

    @field_validator("title", "director", "synopsis", "country", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("release_year")
    @classmethod
    def check_release_year(cls, v):
        return _check_release_year(v)

    @field_validator("genres")
    @classmethod
    def clean_genres(cls, v):
        return _clean_genres(v)

    @field_validator("cast")
    @classmethod
    def clean_cast(cls, v):
        return _clean_cast(v)

    @field_validator("language")
    @classmethod
    def check_language(cls, v):
        return _check_language(v)


class MovieListResponse(BaseModel):
    movies: List[Movie] = Field(description="영화 목록")
    pagination: Pagination = Field(description="페이지 정보")


class MovieMutationResponse(BaseModel):
    message: str = Field(description="처리 결과 메시지")
    movie: Movie = Field(description="영화 정보")

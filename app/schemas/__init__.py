# app/schemas/__init__.py

from .common import Pagination, MessageResponse, OBJECT_ID_PATTERN
from .movie import (
    Movie,
    MovieSummary,
    MovieCreate,
    MovieUpdate,
    MovieListResponse,
    Genre,
)
from .review import (
    Review,
    ReviewCreate,
    ReviewUpdate,
    ReactionRequest,
    ReactionType,
    RatingAggregate,
    ReviewMutationResponse,
    ReviewListResponse,
)
from .user import (
    User,
    UserPrivate,
    UserCreateEmail,
    UserLoginEmail,
    TokenResponse,
    UserStats,
)
from .watchlist import (
    WatchlistItem,
    WatchlistCreate,
    WatchlistUpdate,
    WatchlistPriority,
    WatchlistStats,
)

__all__ = [
    "Pagination",
    "MessageResponse",
    "OBJECT_ID_PATTERN",
    "Movie",
    "MovieSummary",
    "MovieCreate",
    "MovieUpdate",
    "MovieListResponse",
    "Genre",
    "Review",
    "ReviewCreate",
    "ReviewUpdate",
    "ReactionRequest",
    "ReactionType",
    "RatingAggregate",
    "ReviewMutationResponse",
    "ReviewListResponse",
    "User",
    "UserPrivate",
    "UserCreateEmail",
    "UserLoginEmail",
    "TokenResponse",
    "UserStats",
    "WatchlistItem",
    "WatchlistCreate",
    "WatchlistUpdate",
    "WatchlistPriority",
    "WatchlistStats",
]

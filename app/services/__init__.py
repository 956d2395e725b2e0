# app/services/__init__.py

from .rating_service import RatingService
from .review_service import ReviewService
from .movie_service import MovieService
from .user_service import UserService
from .watchlist_service import WatchlistService

__all__ = ["RatingService", "ReviewService", "MovieService", "UserService", "WatchlistService"]

# app/models/__init__.py

from .movie import MovieModel
from .movie_genre import MovieGenreModel
from .user import UserModel
from .review import ReviewModel
from .review_reaction import ReviewReactionModel, ReactionType
from .watchlist import WatchlistModel, WatchlistPriority


__all__ = [
    "MovieModel",
    "MovieGenreModel",
    "UserModel",
    "ReviewModel",
    "ReviewReactionModel",
    "ReactionType",
    "WatchlistModel",
    "WatchlistPriority",
]

# app/models/watchlist.py

import enum
from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint, Enum
from sqlalchemy.sql import func
from app.database import Base, generate_id


class WatchlistPriority(str, enum.Enum):
    low = "low"
    medium = "medium"
    high = "high"


class WatchlistModel(Base):
    __tablename__ = "watchlists"

    item_id = Column(String(24), primary_key=True, default=generate_id)
    user_id = Column(String(24), ForeignKey("users.user_id"), nullable=False, index=True)
    movie_id = Column(String(24), ForeignKey("movies.movie_id"), nullable=False)
    priority = Column(Enum(WatchlistPriority), default=WatchlistPriority.medium, nullable=False)
    notes = Column(String(500), nullable=True)
    date_added = Column(DateTime, default=func.current_timestamp())
    updated_at = Column(
        DateTime, default=func.current_timestamp(), onupdate=func.current_timestamp()
    )

    __table_args__ = (
        UniqueConstraint("user_id", "movie_id", name="unique_watchlist"),
    )

    def __repr__(self):
        return f"<WatchlistModel(user_id={self.user_id}, movie_id={self.movie_id})>"

# app/models/review.py

from sqlalchemy import (
    Column,
    String,
    Integer,
    Text,
    Boolean,
    DateTime,
    ForeignKey,
    UniqueConstraint,
    CheckConstraint,
)
from sqlalchemy.sql import func
from app.database import Base, generate_id


class ReviewModel(Base):
    __tablename__ = "reviews"

    review_id = Column(String(24), primary_key=True, default=generate_id)
    user_id = Column(String(24), ForeignKey("users.user_id"), nullable=False, index=True)
    movie_id = Column(String(24), ForeignKey("movies.movie_id"), nullable=False, index=True)
    rating = Column(Integer, nullable=False)
    review_text = Column(Text, nullable=False)
    spoiler = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=func.current_timestamp())
    updated_at = Column(
        DateTime, default=func.current_timestamp(), onupdate=func.current_timestamp()
    )

    # 사용자당 영화 하나에 리뷰 하나
    __table_args__ = (
        UniqueConstraint("user_id", "movie_id", name="unique_user_movie_review"),
        CheckConstraint("rating BETWEEN 1 AND 5", name="check_review_rating"),
    )

    def __repr__(self):
        return f"<ReviewModel(id={self.review_id}, movie_id={self.movie_id}, rating={self.rating})>"

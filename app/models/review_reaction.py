# app/models/review_reaction.py

import enum
from sqlalchemy import Column, String, DateTime, ForeignKey, Enum
from sqlalchemy.sql import func
from app.database import Base


class ReactionType(str, enum.Enum):
    like = "like"
    dislike = "dislike"


class ReviewReactionModel(Base):
    """리뷰 좋아요/싫어요. (review_id, user_id) 기본키로 한 사용자는 한 가지 반응만 가진다"""

    __tablename__ = "review_reactions"

    review_id = Column(String(24), ForeignKey("reviews.review_id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(String(24), ForeignKey("users.user_id"), primary_key=True)
    reaction = Column(Enum(ReactionType), nullable=False)
    created_at = Column(DateTime, default=func.current_timestamp())

    def __repr__(self):
        return (
            f"<ReviewReactionModel(review_id={self.review_id}, user_id={self.user_id}, "
            f"reaction={self.reaction})>"
        )

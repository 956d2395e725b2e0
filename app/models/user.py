# app/models/user.py

from sqlalchemy import Column, String, Text, DateTime, Boolean, Integer, DECIMAL
from sqlalchemy.sql import func
from app.database import Base, generate_id


class UserModel(Base):
    __tablename__ = "users"

    user_id = Column(String(24), primary_key=True, default=generate_id)
    email = Column(String(255), unique=True, nullable=False)
    username = Column(String(30), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    profile_image_url = Column(Text, nullable=True)
    bio = Column(String(500), nullable=True)
    is_admin = Column(Boolean, default=False, nullable=False)

    # 리뷰 집계 캐시
    total_reviews = Column(Integer, default=0, nullable=False)
    average_rating = Column(DECIMAL(2, 1), default=0, nullable=False)

    created_at = Column(DateTime, default=func.current_timestamp())
    updated_at = Column(DateTime, default=func.current_timestamp(), onupdate=func.current_timestamp())
    last_login = Column(DateTime, nullable=True)

    def __repr__(self):
        return f"<UserModel(id={self.user_id}, username='{self.username}')>"

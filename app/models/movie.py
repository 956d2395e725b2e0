# app/models/movie.py

from sqlalchemy import (
    Column,
    Integer,
    BigInteger,
    String,
    Text,
    DECIMAL,
    Boolean,
    DateTime,
    JSON,
    Index,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base, generate_id


class MovieModel(Base):
    __tablename__ = "movies"

    movie_id = Column(String(24), primary_key=True, default=generate_id)
    title = Column(String(200), nullable=False)
    release_year = Column(Integer, nullable=False)
    director = Column(String(255), nullable=False)
    cast = Column(JSON, nullable=False, default=list)
    synopsis = Column(Text, nullable=False)
    poster_url = Column(Text, nullable=False)
    trailer_url = Column(Text, nullable=True)
    runtime = Column(Integer, nullable=True)
    language = Column(String(50), default="English", nullable=False)
    country = Column(String(100), default="United States", nullable=False)

    # 리뷰 집계 캐시
    average_rating = Column(DECIMAL(2, 1), default=0, nullable=False)
    total_ratings = Column(Integer, default=0, nullable=False)
    total_reviews = Column(Integer, default=0, nullable=False)

    featured = Column(Boolean, default=False, nullable=False)
    trending = Column(Boolean, default=False, nullable=False)
    imdb_rating = Column(DECIMAL(3, 1), nullable=True)
    box_office = Column(BigInteger, nullable=True)
    created_at = Column(DateTime, default=func.current_timestamp())
    updated_at = Column(
        DateTime, default=func.current_timestamp(), onupdate=func.current_timestamp()
    )

    genre_links = relationship(
        "MovieGenreModel",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="MovieGenreModel.position",
    )

    __table_args__ = (
        Index("ix_movies_title", "title"),
        Index("ix_movies_director", "director"),
        Index("ix_movies_release_year", "release_year"),
        Index("ix_movies_average_rating", "average_rating"),
    )

    @property
    def genres(self):
        return [link.genre for link in self.genre_links]

    @property
    def formatted_runtime(self):
        if not self.runtime:
            return None
        return f"{self.runtime // 60}h {self.runtime % 60}m"

    def __repr__(self):
        return f"<MovieModel(movie_id={self.movie_id}, title='{self.title}')>"

# app/models/movie_genre.py

from sqlalchemy import Column, String, Integer, ForeignKey
from app.database import Base


class MovieGenreModel(Base):
    __tablename__ = "movie_genres"

    movie_id = Column(String(24), ForeignKey("movies.movie_id", ondelete="CASCADE"), primary_key=True)
    genre = Column(String(30), primary_key=True)
    position = Column(Integer, default=0, nullable=False)

    def __repr__(self):
        return f"<MovieGenreModel(movie_id={self.movie_id}, genre={self.genre})>"

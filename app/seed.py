# app/seed.py

"""데모 데이터 적재

    python -m app.seed

관리자/데모 사용자, 영화, 리뷰를 넣고 마지막에 전체 집계를 다시 계산한다.
이미 같은 이메일의 사용자가 있으면 아무것도 하지 않는다.
"""

import logging
from sqlalchemy import select
from app.database import SessionLocal, engine, Base
from app.models import MovieModel, MovieGenreModel, UserModel, ReviewModel
from app.core.auth import get_password_hash
from app.core.logging_config import setup_logging
from app.services.rating_service import RatingService

logger = logging.getLogger(__name__)

USERS = [
    {"email": "admin@moviereview.dev", "username": "admin", "password": "admin1234", "is_admin": True},
    {"email": "alice@moviereview.dev", "username": "alice", "password": "password123"},
    {"email": "bob@moviereview.dev", "username": "bob", "password": "password123"},
    {"email": "carol@moviereview.dev", "username": "carol", "password": "password123"},
]

MOVIES = [
    {
        "title": "The Shawshank Redemption",
        "genres": ["Drama"],
        "release_year": 1994,
        "director": "Frank Darabont",
        "cast": ["Tim Robbins", "Morgan Freeman"],
        "synopsis": "Two imprisoned men bond over a number of years, finding solace and eventual redemption through acts of common decency.",
        "poster_url": "https://image.tmdb.org/t/p/w500/q6y0Go1tsGEsmtFryDOJo3dEmqu.jpg",
        "runtime": 142,
        "imdb_rating": 9.3,
        "featured": True,
    },
    {
        "title": "The Dark Knight",
        "genres": ["Action", "Crime", "Drama"],
        "release_year": 2008,
        "director": "Christopher Nolan",
        "cast": ["Christian Bale", "Heath Ledger", "Aaron Eckhart"],
        "synopsis": "Batman raises the stakes in his war on crime and faces the Joker, a criminal mastermind who wants to plunge Gotham into anarchy.",
        "poster_url": "https://image.tmdb.org/t/p/w500/qJ2tW6WMUDux911r6m7haRef0WH.jpg",
        "runtime": 152,
        "imdb_rating": 9.0,
        "featured": True,
        "trending": True,
    },
    {
        "title": "Inception",
        "genres": ["Action", "Sci-Fi", "Thriller"],
        "release_year": 2010,
        "director": "Christopher Nolan",
        "cast": ["Leonardo DiCaprio", "Joseph Gordon-Levitt", "Elliot Page"],
        "synopsis": "A thief who steals corporate secrets through dream-sharing technology is given the inverse task of planting an idea into the mind of a CEO.",
        "poster_url": "https://image.tmdb.org/t/p/w500/oYuLEt3zVCKq57qu2F8dT7NIa6f.jpg",
        "runtime": 148,
        "imdb_rating": 8.8,
        "trending": True,
    },
    {
        "title": "Parasite",
        "genres": ["Comedy", "Drama", "Thriller"],
        "release_year": 2019,
        "director": "Bong Joon Ho",
        "cast": ["Song Kang-ho", "Lee Sun-kyun", "Cho Yeo-jeong"],
        "synopsis": "Greed and class discrimination threaten the newly formed symbiotic relationship between the wealthy Park family and the destitute Kim clan.",
        "poster_url": "https://image.tmdb.org/t/p/w500/7IiTTgloJzvGI1TAYymCfbfl3vT.jpg",
        "runtime": 132,
        "language": "Korean",
        "country": "South Korea",
        "imdb_rating": 8.5,
        "featured": True,
        "trending": True,
    },
]

# (사용자 이름, 영화 제목, 평점, 내용)
REVIEWS = [
    ("alice", "The Shawshank Redemption", 5, "A timeless story about hope and friendship."),
    ("bob", "The Shawshank Redemption", 4, "Slow at first but the ending is worth every minute."),
    ("alice", "The Dark Knight", 5, "Heath Ledger's Joker is unforgettable."),
    ("carol", "The Dark Knight", 4, "Dark, tense and brilliantly paced."),
    ("bob", "Inception", 3, "Clever idea, but the exposition gets heavy."),
    ("carol", "Parasite", 5, "Sharp, funny and devastating all at once."),
]


def seed():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        if db.execute(select(UserModel).where(UserModel.email == USERS[0]["email"])).scalar_one_or_none():
            logger.info("이미 데모 데이터가 있습니다")
            return

        users = {}
        for data in USERS:
            user = UserModel(
                email=data["email"],
                username=data["username"],
                password_hash=get_password_hash(data["password"]),
                is_admin=data.get("is_admin", False),
            )
            db.add(user)
            users[user.username] = user

        movies = {}
        for data in MOVIES:
            data = dict(data)
            genres = data.pop("genres")
            movie = MovieModel(**data)
            movie.genre_links = [
                MovieGenreModel(genre=genre, position=position) for position, genre in enumerate(genres)
            ]
            db.add(movie)
            movies[movie.title] = movie
        db.flush()

        for username, title, rating, text in REVIEWS:
            db.add(
                ReviewModel(
                    user_id=users[username].user_id,
                    movie_id=movies[title].movie_id,
                    rating=rating,
                    review_text=text,
                )
            )
        db.commit()

        result = RatingService(db).reconcile_all()
        logger.info(
            f"데모 데이터 적재 완료 users={len(users)} movies={len(movies)} reviews={len(REVIEWS)} "
            f"aggregates={result}"
        )
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    setup_logging()
    seed()

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from app.main import app
from app.database import Base, get_db
from app.models import MovieModel, MovieGenreModel, UserModel, ReviewModel
from app.core.auth import get_password_hash, create_access_token

TEST_PASSWORD = "password123"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest_asyncio.fixture
async def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides = {}


@pytest.fixture
def make_user(db):
    def _make_user(username: str, is_admin: bool = False) -> UserModel:
        user = UserModel(
            email=f"{username}@example.com",
            username=username,
            password_hash=get_password_hash(TEST_PASSWORD),
            is_admin=is_admin,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_movie(db):
    def _make_movie(title: str = "Inception", genres=("Action", "Sci-Fi"), **overrides) -> MovieModel:
        data = {
            "title": title,
            "release_year": 2010,
            "director": "Christopher Nolan",
            "cast": ["Leonardo DiCaprio"],
            "synopsis": "A thief who steals corporate secrets through dream-sharing technology.",
            "poster_url": "https://example.com/poster.jpg",
            "runtime": 148,
        }
        data.update(overrides)
        movie = MovieModel(**data)
        movie.genre_links = [
            MovieGenreModel(genre=genre, position=position) for position, genre in enumerate(genres)
        ]
        db.add(movie)
        db.commit()
        db.refresh(movie)
        return movie

    return _make_movie


@pytest.fixture
def make_review(db):
    """집계 재계산 없이 리뷰 행만 넣는다"""

    def _make_review(user: UserModel, movie: MovieModel, rating: int) -> ReviewModel:
        review = ReviewModel(
            user_id=user.user_id,
            movie_id=movie.movie_id,
            rating=rating,
            review_text="A review long enough to pass validation.",
        )
        db.add(review)
        db.commit()
        db.refresh(review)
        return review

    return _make_review


@pytest.fixture
def auth_headers():
    def _auth_headers(user: UserModel) -> dict:
        token = create_access_token(data={"sub": user.user_id})
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers

from decimal import Decimal
import pytest
from sqlalchemy import select, func
from sqlalchemy.exc import OperationalError
from app.models.review import ReviewModel
from app.models.review_reaction import ReviewReactionModel, ReactionType as ReactionTypeModel
from app.services.rating_service import RatingService
from app.services.review_service import ReviewService
from app.schemas.review import ReviewCreate, ReviewUpdate, ReactionType
from app.core.exceptions import (
    NotFoundException,
    DuplicateReviewException,
    NotAuthorizedException,
    SelfReactionException,
    StorageFailureException,
)

REVIEW_TEXT = "Layered, clever and worth a second watch."


def review_create(movie, rating: int) -> ReviewCreate:
    return ReviewCreate(movie_id=movie.movie_id, rating=rating, review_text=REVIEW_TEXT)


@pytest.mark.asyncio
async def test_create_review_updates_movie_and_user(db, make_user, make_movie):
    movie = make_movie()
    alice = make_user("alice")
    bob = make_user("bob")
    service = ReviewService(db)

    await service.create_review(alice.user_id, review_create(movie, 4))
    result = await service.create_review(bob.user_id, review_create(movie, 5))

    assert result.movie_rating.average_rating == Decimal("4.5")
    assert result.movie_rating.total_reviews == 2
    assert result.user_rating.scope_id == bob.user_id
    assert result.user_rating.average_rating == Decimal("5.0")
    assert result.review.username == "bob"

    db.expire_all()
    assert movie.average_rating == Decimal("4.5")
    assert movie.total_ratings == 2
    assert alice.total_reviews == 1


@pytest.mark.asyncio
async def test_create_then_delete_scenario(db, make_user, make_movie):
    movie = make_movie()
    alice, bob, carol = make_user("alice"), make_user("bob"), make_user("carol")
    service = ReviewService(db)

    await service.create_review(alice.user_id, review_create(movie, 4))
    bob_review = await service.create_review(bob.user_id, review_create(movie, 5))
    result = await service.create_review(carol.user_id, review_create(movie, 3))
    assert result.movie_rating.average_rating == Decimal("4.0")
    assert result.movie_rating.total_reviews == 3

    result = await service.delete_review(bob_review.review.review_id, bob.user_id)
    assert result.movie_rating.average_rating == Decimal("3.5")
    assert result.movie_rating.total_reviews == 2
    assert result.user_rating.average_rating == Decimal("0.0")
    assert result.user_rating.total_reviews == 0


@pytest.mark.asyncio
async def test_duplicate_review_leaves_aggregates_unchanged(db, make_user, make_movie):
    movie = make_movie()
    alice = make_user("alice")
    service = ReviewService(db)
    await service.create_review(alice.user_id, review_create(movie, 4))

    with pytest.raises(DuplicateReviewException):
        await service.create_review(alice.user_id, review_create(movie, 1))

    db.expire_all()
    assert movie.average_rating == Decimal("4.0")
    assert movie.total_reviews == 1
    assert alice.total_reviews == 1


@pytest.mark.asyncio
async def test_create_review_for_missing_movie(db, make_user):
    alice = make_user("alice")

    with pytest.raises(NotFoundException):
        await ReviewService(db).create_review(
            alice.user_id, ReviewCreate(movie_id="a" * 24, rating=3, review_text=REVIEW_TEXT)
        )

    db.expire_all()
    assert alice.total_reviews == 0


@pytest.mark.asyncio
async def test_deleting_only_review_resets_movie(db, make_user, make_movie):
    movie = make_movie()
    alice = make_user("alice")
    service = ReviewService(db)
    created = await service.create_review(alice.user_id, review_create(movie, 2))

    result = await service.delete_review(created.review.review_id, alice.user_id)

    assert result.review is None
    db.expire_all()
    assert movie.average_rating == Decimal("0.0")
    assert movie.total_reviews == 0
    assert movie.total_ratings == 0


@pytest.mark.asyncio
async def test_update_review_recomputes_from_full_set(db, make_user, make_movie):
    movie = make_movie()
    alice = make_user("alice")
    bob = make_user("bob")
    service = ReviewService(db)
    await service.create_review(alice.user_id, review_create(movie, 4))
    created = await service.create_review(bob.user_id, review_create(movie, 5))

    result = await service.update_review(
        created.review.review_id, bob.user_id, ReviewUpdate(rating=1)
    )

    assert result.review.rating == 1
    assert result.movie_rating.average_rating == Decimal("2.5")
    assert result.movie_rating.total_reviews == 2
    assert result.user_rating.average_rating == Decimal("1.0")


@pytest.mark.asyncio
async def test_update_text_only_keeps_user_aggregate(db, make_user, make_movie):
    movie = make_movie()
    alice = make_user("alice")
    service = ReviewService(db)
    created = await service.create_review(alice.user_id, review_create(movie, 4))

    result = await service.update_review(
        created.review.review_id,
        alice.user_id,
        ReviewUpdate(review_text="Changed my mind about the ending."),
    )

    assert result.review.review_text == "Changed my mind about the ending."
    assert result.movie_rating.average_rating == Decimal("4.0")
    assert result.user_rating is None


@pytest.mark.asyncio
async def test_only_owner_can_update_or_delete(db, make_user, make_movie):
    movie = make_movie()
    alice = make_user("alice")
    mallory = make_user("mallory")
    service = ReviewService(db)
    created = await service.create_review(alice.user_id, review_create(movie, 4))
    review_id = created.review.review_id

    with pytest.raises(NotAuthorizedException):
        await service.update_review(review_id, mallory.user_id, ReviewUpdate(rating=1))
    with pytest.raises(NotAuthorizedException):
        await service.delete_review(review_id, mallory.user_id)

    review = await service.get_review(review_id)
    assert review.rating == 4
    db.expire_all()
    assert movie.average_rating == Decimal("4.0")


@pytest.mark.asyncio
async def test_reaction_toggle_and_switch(db, make_user, make_movie):
    movie = make_movie()
    alice = make_user("alice")
    bob = make_user("bob")
    service = ReviewService(db)
    created = await service.create_review(alice.user_id, review_create(movie, 4))
    review_id = created.review.review_id

    review = await service.toggle_reaction(review_id, bob.user_id, ReactionType.like)
    assert review.likes == [bob.user_id]
    assert review.dislikes == []

    # 좋아요 -> 싫어요 전환
    review = await service.toggle_reaction(review_id, bob.user_id, ReactionType.dislike)
    assert review.likes == []
    assert review.dislikes == [bob.user_id]
    assert review.dislikes_count == 1

    # 같은 반응을 다시 보내면 취소
    review = await service.toggle_reaction(review_id, bob.user_id, ReactionType.dislike)
    assert review.likes == []
    assert review.dislikes == []

    db.expire_all()
    assert movie.average_rating == Decimal("4.0")
    assert movie.total_reviews == 1


@pytest.mark.asyncio
async def test_self_reaction_is_rejected(db, make_user, make_movie):
    movie = make_movie()
    alice = make_user("alice")
    service = ReviewService(db)
    created = await service.create_review(alice.user_id, review_create(movie, 4))
    review_id = created.review.review_id

    with pytest.raises(SelfReactionException):
        await service.toggle_reaction(review_id, alice.user_id, ReactionType.like)

    review = await service.get_review(review_id)
    assert review.likes == []
    assert review.dislikes == []


@pytest.mark.asyncio
async def test_reaction_on_missing_review(db, make_user):
    bob = make_user("bob")

    with pytest.raises(NotFoundException):
        await ReviewService(db).toggle_reaction("b" * 24, bob.user_id, ReactionType.like)


@pytest.mark.asyncio
async def test_deleting_review_removes_its_reactions(db, make_user, make_movie):
    movie = make_movie()
    alice = make_user("alice")
    bob = make_user("bob")
    service = ReviewService(db)
    created = await service.create_review(alice.user_id, review_create(movie, 4))
    review_id = created.review.review_id
    await service.toggle_reaction(review_id, bob.user_id, ReactionType.like)

    await service.delete_review(review_id, alice.user_id)

    with pytest.raises(NotFoundException):
        await service.get_review(review_id)


class FailingUserRecalculation(RatingService):
    """사용자 집계 단계에서 DB 오류를 내는 집계 서비스"""

    def recalculate_user_rating(self, user_id: str):
        raise OperationalError("UPDATE users", {}, Exception("database is locked"))


@pytest.mark.asyncio
async def test_failed_recompute_rolls_back_created_review(db, make_user, make_movie):
    movie = make_movie()
    alice = make_user("alice")
    service = ReviewService(db, FailingUserRecalculation(db))

    with pytest.raises(StorageFailureException):
        await service.create_review(alice.user_id, review_create(movie, 5))

    assert db.execute(select(func.count(ReviewModel.review_id))).scalar() == 0
    db.expire_all()
    assert movie.total_reviews == 0
    assert movie.average_rating == Decimal("0.0")
    assert alice.total_reviews == 0


@pytest.mark.asyncio
async def test_failed_recompute_keeps_deleted_review(db, make_user, make_movie):
    movie = make_movie()
    alice = make_user("alice")
    created = await ReviewService(db).create_review(alice.user_id, review_create(movie, 4))
    review_id = created.review.review_id

    with pytest.raises(StorageFailureException):
        await ReviewService(db, FailingUserRecalculation(db)).delete_review(review_id, alice.user_id)

    review = await ReviewService(db).get_review(review_id)
    assert review.rating == 4
    db.expire_all()
    assert movie.total_reviews == 1
    assert movie.average_rating == Decimal("4.0")
    assert alice.total_reviews == 1


async def _review_with_concurrent_like(db, session_factory, make_user, make_movie):
    """bob 의 좋아요가 다른 세션에서 이미 들어간 리뷰"""
    movie = make_movie()
    alice = make_user("alice")
    bob = make_user("bob")
    service = ReviewService(db)
    created = await service.create_review(alice.user_id, review_create(movie, 4))
    review_id = created.review.review_id

    other = session_factory()
    other.add(ReviewReactionModel(review_id=review_id, user_id=bob.user_id, reaction=ReactionTypeModel.like))
    other.commit()
    other.close()
    return service, review_id, bob


@pytest.mark.asyncio
async def test_reaction_insert_conflict_is_retried(db, session_factory, make_user, make_movie, monkeypatch):
    service, review_id, bob = await _review_with_concurrent_like(db, session_factory, make_user, make_movie)
    find_reaction = service._find_reaction
    lookups = []

    def stale_first_lookup(review_id, user_id):
        lookups.append(review_id)
        return None if len(lookups) == 1 else find_reaction(review_id, user_id)

    monkeypatch.setattr(service, "_find_reaction", stale_first_lookup)

    review = await service.toggle_reaction(review_id, bob.user_id, ReactionType.like)

    # 두 번째 시도에서 이미 있는 좋아요를 보고 토글 규칙대로 취소
    assert len(lookups) == 2
    assert review.likes == []
    assert review.dislikes == []


@pytest.mark.asyncio
async def test_reaction_conflict_twice_is_storage_failure(
    db, session_factory, make_user, make_movie, monkeypatch
):
    service, review_id, bob = await _review_with_concurrent_like(db, session_factory, make_user, make_movie)
    monkeypatch.setattr(service, "_find_reaction", lambda review_id, user_id: None)

    with pytest.raises(StorageFailureException):
        await service.toggle_reaction(review_id, bob.user_id, ReactionType.dislike)

    review = await service.get_review(review_id)
    assert review.likes == [bob.user_id]

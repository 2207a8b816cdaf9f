"""
Reviews and contact messages

- Ratings are integers 1..5; only the author may change a review.
- Average rating is rounded to one decimal, (0, 0) with no reviews.
- Contact messages need every field and group per author.
"""
import pytest

from messhub.domain.exceptions import (
    BadRequestError,
    ForbiddenError,
    InvalidRatingError,
    NotFoundError,
    ValidationError,
)


@pytest.fixture
async def mess(build):
    owner = await build.account("OWNER")
    return await build.mess(owner.id)


@pytest.mark.parametrize("rating", [0, 6, 3.5, "5", True])
async def test_rating_out_of_range_is_rejected(factory, build, mess, rating):
    customer = await build.account()
    with pytest.raises(InvalidRatingError):
        await factory.create_review_service().create(customer.id, mess.id, rating)


@pytest.mark.parametrize("rating", [1, 5])
async def test_rating_bounds_are_accepted(factory, build, mess, rating):
    customer = await build.account()
    review = await factory.create_review_service().create(customer.id, mess.id, rating, " Tasty ")
    assert review.rating == rating
    assert review.comment == "Tasty"


async def test_long_comment_is_rejected(factory, build, mess):
    customer = await build.account()
    reviews = factory.create_review_service()
    with pytest.raises(ValidationError) as excinfo:
        await reviews.create(customer.id, mess.id, 4, "x" * 501)
    assert excinfo.value.errors[0].startswith("comment:")
    assert await reviews.list(mess_id=mess.id) == []


async def test_review_for_unknown_mess(factory, build):
    customer = await build.account()
    with pytest.raises(NotFoundError):
        await factory.create_review_service().create(customer.id, 404, 4)


async def test_only_author_may_modify(factory, build, mess):
    author = await build.account()
    stranger = await build.account()
    reviews = factory.create_review_service()
    review = await reviews.create(author.id, mess.id, 3, "Average food")

    with pytest.raises(ForbiddenError):
        await reviews.update(review.id, stranger.id, {"rating": 1})
    with pytest.raises(ForbiddenError):
        await reviews.delete(review.id, stranger.id)

    updated = await reviews.update(review.id, author.id, {"rating": 4})
    assert (updated.rating, updated.comment) == (4, "Average food")
    with pytest.raises(InvalidRatingError):
        await reviews.update(review.id, author.id, {"rating": 9})
    with pytest.raises(ValidationError):
        await reviews.update(review.id, author.id, {"mess_id": 2})

    await reviews.delete(review.id, author.id)
    with pytest.raises(NotFoundError):
        await reviews.get(review.id)


async def test_average_rating(factory, build, mess):
    reviews = factory.create_review_service()
    empty = await reviews.average_rating(mess.id)
    assert (empty.average_rating, empty.total_reviews) == (0, 0)

    for rating in (4, 5, 3):
        customer = await build.account()
        await reviews.create(customer.id, mess.id, rating)
    summary = await reviews.average_rating(mess.id)
    assert (summary.average_rating, summary.total_reviews) == (4.0, 3)


async def test_average_is_rounded_to_one_decimal(factory, build, mess):
    reviews = factory.create_review_service()
    for rating in (5, 4, 4):
        customer = await build.account()
        await reviews.create(customer.id, mess.id, rating)
    assert (await reviews.average_rating(mess.id)).average_rating == 4.3


async def test_review_listing_filters(factory, build, mess):
    customer = await build.account()
    reviews = factory.create_review_service()
    review = await reviews.create(customer.id, mess.id, 5)

    assert [r.id for r in await reviews.list(mess_id=mess.id)] == [review.id]
    assert [r.id for r in await reviews.list(customer_id=customer.id)] == [review.id]
    assert [r.id for r in await reviews.list_for_mess(mess.id)] == [review.id]
    assert await reviews.list(customer_id=customer.id + 100) == []


# --- Contacts ---

@pytest.mark.parametrize("missing", ["name", "email", "message"])
async def test_contact_requires_every_field(factory, build, missing):
    customer = await build.account()
    fields = {"name": "Asha", "email": "asha@example.com", "message": "Please add Jain meals."}
    fields[missing] = ""
    with pytest.raises(BadRequestError):
        await factory.create_contact_service().create(customer.id, **fields)


async def test_contact_requires_author(factory):
    with pytest.raises(BadRequestError):
        await factory.create_contact_service().create(None, "Asha", "asha@example.com", "Hello there")


async def test_contact_email_is_validated_and_normalised(factory, build):
    customer = await build.account()
    contacts = factory.create_contact_service()
    with pytest.raises(ValidationError):
        await contacts.create(customer.id, "Asha", "not-an-email", "Hello there")

    saved = await contacts.create(customer.id, " Asha ", " Asha@Example.com ", " Hello there ")
    assert (saved.name, saved.email, saved.message) == ("Asha", "asha@example.com", "Hello there")


async def test_contact_grouping_and_stats(factory, build):
    asha = await build.account(name="Asha Rao")
    ravi = await build.account(name="Ravi Kumar")
    contacts = factory.create_contact_service()
    await contacts.create(asha.id, "Asha", "asha@example.com", "First message")
    await contacts.create(ravi.id, "Ravi", "ravi@example.com", "Delivery was late")
    latest = await contacts.create(asha.id, "Asha", "asha@example.com", "Second message")

    groups = {g.author_account_id: g for g in await contacts.group_by_user()}
    assert groups[asha.id].message_count == 2
    assert groups[asha.id].author_name == "Asha Rao"
    assert groups[asha.id].messages[0].id == latest.id
    assert groups[ravi.id].message_count == 1

    assert await contacts.statistics() == {"total_contacts": 3, "unique_users": 2}


async def test_contact_delete(factory, build):
    customer = await build.account()
    contacts = factory.create_contact_service()
    first = await contacts.create(customer.id, "Asha", "asha@example.com", "One")
    await contacts.create(customer.id, "Asha", "asha@example.com", "Two")

    await contacts.delete(first.id)
    with pytest.raises(NotFoundError):
        await contacts.get(first.id)
    assert await contacts.delete_all() == 1
    assert await contacts.list_all() == []

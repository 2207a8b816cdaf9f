"""
Messes and meals

- Filters return empty lists instead of errors; lookups by id raise NotFound.
- Field rules (lengths, phone, meal type, price) are enforced.
- Deleting a mess removes its meals.
"""
import pytest

from messhub.domain.exceptions import NotFoundError, ValidationError


async def test_mess_filters(factory, build):
    owner = await build.account("OWNER")
    await build.mess(owner.id, name="Annapurna Mess", area="Koramangala",
                     description="South Indian thalis and filter coffee.")
    await build.mess(owner.id, name="Punjabi Dhaba", area="Indiranagar",
                     description="Parathas, dal makhani and lassi.", is_active=False)
    messes = factory.create_mess_service()

    assert [m.name for m in await messes.list(area="koraman")] == ["Annapurna Mess"]
    assert [m.name for m in await messes.list(search="LASSI")] == ["Punjabi Dhaba"]
    assert [m.name for m in await messes.list(search="annapurna")] == ["Annapurna Mess"]
    assert [m.name for m in await messes.list(active_only=True)] == ["Annapurna Mess"]
    assert len(await messes.list()) == 2


async def test_zero_match_filter_is_empty_list(factory, build):
    owner = await build.account("OWNER")
    await build.mess(owner.id)
    assert await factory.create_mess_service().list(area="Atlantis") == []
    assert await factory.create_meal_service().list(meal_type="dinner") == []


async def test_mess_validation(factory, build):
    owner = await build.account("OWNER")
    with pytest.raises(ValidationError) as excinfo:
        await build.mess(owner.id, name="AB", phone="12345", description="short")
    joined = " ".join(excinfo.value.errors)
    assert "name" in joined and "phone" in joined and "description" in joined


async def test_mess_missing_fields(factory, build):
    owner = await build.account("OWNER")
    with pytest.raises(ValidationError) as excinfo:
        await factory.create_mess_service().create(owner.id, {"name": "Only Name"})
    assert "area: Field required" in excinfo.value.errors


async def test_mess_update_and_delete(factory, build):
    owner = await build.account("OWNER")
    mess = await build.mess(owner.id)
    messes = factory.create_mess_service()

    updated = await messes.update(mess.id, {"area": "  HSR Layout  ", "is_active": False})
    assert updated.area == "HSR Layout"
    assert updated.is_active is False

    await messes.delete(mess.id)
    with pytest.raises(NotFoundError):
        await messes.get(mess.id)
    with pytest.raises(NotFoundError):
        await messes.update(mess.id, {"area": "Jayanagar"})
    with pytest.raises(NotFoundError):
        await messes.delete(mess.id)


async def test_many_messes_per_owner_and_ownership(factory, build):
    owner = await build.account("OWNER")
    other = await build.account("OWNER")
    first = await build.mess(owner.id)
    await build.mess(owner.id)
    messes = factory.create_mess_service()

    assert len(await messes.list_by_owner(owner.id)) == 2
    assert await messes.verify_ownership(first.id, owner.id) is True
    assert await messes.verify_ownership(first.id, other.id) is False
    with pytest.raises(NotFoundError):
        await messes.verify_ownership(999, owner.id)


async def test_meal_rules(factory, build):
    owner = await build.account("OWNER")
    mess = await build.mess(owner.id)
    with pytest.raises(ValidationError):
        await build.meal(mess.id, meal_type="brunch")
    with pytest.raises(ValidationError):
        await build.meal(mess.id, price=0.5)
    with pytest.raises(ValidationError):
        await build.meal(mess.id, description="tiny")
    with pytest.raises(ValidationError):
        await build.meal(mess.id, price=float("inf"))
    with pytest.raises(ValidationError):
        await build.meal(mess.id, price=float("nan"))
    assert await factory.create_meal_service().list(mess_id=mess.id) == []

    meal = await build.meal(mess.id, price=1)
    assert meal.price == 1
    assert meal.is_available is True


async def test_meal_for_unknown_mess(factory, build):
    with pytest.raises(NotFoundError):
        await build.meal(12345)


async def test_meal_filters_and_helpers(factory, build):
    owner = await build.account("OWNER")
    mess_a = await build.mess(owner.id)
    mess_b = await build.mess(owner.id)
    veg = await build.meal(mess_a.id, meal_type="breakfast", is_veg=True)
    chicken = await build.meal(mess_b.id, meal_type="dinner", is_veg=False, is_available=False)
    meals = factory.create_meal_service()

    assert [m.id for m in await meals.list(mess_id=mess_a.id)] == [veg.id]
    assert [m.id for m in await meals.list(is_veg=False)] == [chicken.id]
    assert [m.id for m in await meals.list(is_available=True)] == [veg.id]
    assert [m.id for m in await meals.list(meal_type="dinner")] == [chicken.id]

    assert await meals.verify_ownership(veg.id, mess_a.id) is True
    assert await meals.verify_ownership(veg.id, mess_b.id) is False
    assert await meals.is_available(chicken.id) is False


async def test_meal_update_and_delete(factory, build):
    owner = await build.account("OWNER")
    mess = await build.mess(owner.id)
    meal = await build.meal(mess.id)
    meals = factory.create_meal_service()

    updated = await meals.update(meal.id, {"price": 120, "is_available": False})
    assert (updated.price, updated.is_available) == (120, False)
    with pytest.raises(ValidationError):
        await meals.update(meal.id, {"price": 0})
    with pytest.raises(ValidationError):
        await meals.update(meal.id, {"price": float("inf")})
    assert (await meals.get(meal.id)).price == 120

    await meals.delete(meal.id)
    with pytest.raises(NotFoundError):
        await meals.get(meal.id)


async def test_deleting_mess_removes_its_meals(factory, build):
    owner = await build.account("OWNER")
    mess = await build.mess(owner.id)
    meal = await build.meal(mess.id)

    await factory.create_mess_service().delete(mess.id)
    with pytest.raises(NotFoundError):
        await factory.create_meal_service().get(meal.id)

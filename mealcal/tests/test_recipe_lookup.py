from datetime import datetime, timedelta, timezone

import pytest

from mealcal.domain.errors import NotFoundError, UpstreamUnavailableError, ValidationError
from mealcal.infra.recipe_lookup import RecipeLookup


@pytest.fixture
def lookup(recipe_repo, fake_mealdb):
    return RecipeLookup(recipe_repo, fake_mealdb.client())


def test_cache_miss_fetches_normalizes_and_caches(lookup, recipe_repo, fake_mealdb):
    recipe = lookup.get_recipe_by_id("52772")
    assert recipe.title == "Teriyaki Chicken Casserole"
    assert recipe.data_source == "themealdb"
    assert recipe.ingredients == ["3/4 cup soy sauce", "2 chicken breasts"]
    assert recipe_repo.find("52772") is not None

    lookup.get_recipe_by_id("52772")
    assert len(fake_mealdb.requests) == 1


def test_unknown_ids(lookup, fake_mealdb):
    with pytest.raises(NotFoundError):
        lookup.get_recipe_by_id("99999")
    with pytest.raises(NotFoundError):
        lookup.get_recipe_by_id("not-a-mealdb-id")
    with pytest.raises(ValidationError):
        lookup.get_recipe_by_id("")
    # Non-numeric misses never reach the network
    assert len(fake_mealdb.requests) == 1


def test_upstream_failure(lookup, fake_mealdb):
    fake_mealdb.fail = True
    with pytest.raises(UpstreamUnavailableError):
        lookup.get_recipe_by_id("52772")


def test_stale_recipe_returned_as_is_without_refresh(lookup, recipe_repo, fake_mealdb):
    old = datetime.now(timezone.utc) - timedelta(days=3)
    lookup.get_recipe_by_id("52772", now=old)
    fake_mealdb.meals["52772"]["strMeal"] = "Teriyaki Chicken v2"

    cached = lookup.get_recipe_by_id("52772")
    assert cached.title == "Teriyaki Chicken Casserole"
    assert cached.is_stale()

    refreshed = lookup.get_recipe_by_id("52772", refresh=True)
    assert refreshed.title == "Teriyaki Chicken v2"
    assert not refreshed.is_stale()
    assert recipe_repo.get("52772").title == "Teriyaki Chicken v2"


def test_failed_refresh_serves_stale_copy(lookup, fake_mealdb):
    old = datetime.now(timezone.utc) - timedelta(days=3)
    lookup.get_recipe_by_id("52772", now=old)
    fake_mealdb.fail = True
    recipe = lookup.get_recipe_by_id("52772", refresh=True)
    assert recipe.title == "Teriyaki Chicken Casserole"


def test_import_from_payload_finds_or_creates(lookup, recipe_repo, meal_payload):
    payload = meal_payload("60001", "Imported Stew", "Beef")
    first = lookup.import_from_payload(payload)
    again = lookup.import_from_payload(dict(payload, strMeal="Changed"))
    assert first.id == again.id == "60001"
    assert again.title == "Imported Stew"
    assert len(recipe_repo.list_all()) == 1

    with pytest.raises(ValidationError):
        lookup.import_from_payload({"strMeal": "No id"})


def test_search(lookup):
    results = lookup.search(query="salmon")
    assert [r.title for r in results] == ["Baked salmon with fennel"]
    by_category = lookup.search(category="Chicken")
    assert [r.id for r in by_category] == ["52772"]
    assert len(lookup.search(count=1)) == 1


def test_reference_lists(lookup):
    assert lookup.categories() == ["Chicken", "Seafood"]
    assert lookup.categories(detailed=True) == [{"strCategory": "Chicken"}]
    assert lookup.areas() == ["Japanese"]
    assert lookup.ingredients() == [
        {"id": "1", "name": "Chicken", "description": "The chicken is a domesticated bird."},
        {"id": "2", "name": "Salmon", "description": ""},
    ]
    assert [i["name"] for i in lookup.ingredients(limit=1)] == ["Chicken"]


def test_random_meals_are_normalized_not_cached(lookup, recipe_repo):
    recipes = lookup.random(2)
    assert [r.id for r in recipes] == ["52772", "52772"]
    assert recipes[0].data_source == "themealdb"
    assert recipe_repo.list_all() == []


def test_browse_by_first_letter(lookup, fake_mealdb):
    assert [r.title for r in lookup.by_first_letter("B")] == ["Baked salmon with fennel"]
    assert fake_mealdb.requests[-1].url.params["f"] == "b"
    assert [r.id for r in lookup.search(letter="t")] == ["52772"]
    with pytest.raises(ValidationError):
        lookup.by_first_letter("7")
    with pytest.raises(ValidationError):
        lookup.by_first_letter("ab")

from datetime import date

import pytest
from fastapi.testclient import TestClient

from mealcal.api import deps
from mealcal.api.api_run import app
from mealcal.domain.MealPlan import MealPlan
from mealcal.domain.Recipe import DetailedIngredient, Recipe
from mealcal.events.Event_Bus import GLOBAL_EVENT_BUS, GROCERY_LIST_GENERATED


@pytest.fixture
def client(plan_repo, grocery_repo):
    app.dependency_overrides[deps.get_plan_repository] = lambda: plan_repo
    app.dependency_overrides[deps.get_grocery_list_repository] = lambda: grocery_repo
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def stored_plan(plan_repo):
    pancakes = Recipe(id="pancakes", title="Pancakes", detailed_ingredients=[
        DetailedIngredient("Milk", "2", "cups"),
        DetailedIngredient("Flour", "1", "cup"),
    ])
    latte = Recipe(id="latte", title="Latte", detailed_ingredients=[DetailedIngredient(" milk ", "1", "cup")])
    plan = MealPlan.new("user-1", date(2024, 1, 10))
    plan.add_meal("2024-01-08", "Breakfast", pancakes)
    plan.add_meal("2024-01-09", "Snack", latte)
    return plan_repo.create(plan)


def test_generate_from_plan_is_saved(client, stored_plan, grocery_repo):
    received = []
    listener = lambda name, payload: received.append(payload)
    GLOBAL_EVENT_BUS.subscribe(GROCERY_LIST_GENERATED, listener)
    try:
        resp = client.post("/api/grocery-lists/generate", json={"meal_plan_id": stored_plan.id})
    finally:
        GLOBAL_EVENT_BUS.unsubscribe(GROCERY_LIST_GENERATED, listener)

    assert resp.status_code == 201, resp.text
    data = resp.json()
    assert data["user_id"] == "user-1"
    assert data["meal_plan_id"] == stored_plan.id
    assert data["notes"] == "Generated from meal plan for Jan 7 - Jan 13, 2024"
    assert [(i["name"], i["amount"], i["category"]) for i in data["items"]] == [
        ("Milk", "2 + 1", "Other"), ("Flour", "1", "Other"),
    ]
    assert grocery_repo.get(data["id"]).items[0].name == "Milk"
    assert received and received[0]["grocery_list"]["id"] == data["id"]


def test_generate_with_range(client, stored_plan):
    resp = client.post("/api/grocery-lists/generate", json={
        "meal_plan_id": stored_plan.id, "start_date": "2024-01-09", "end_date": "2024-01-09",
    })
    assert [i["name"] for i in resp.json()["items"]] == ["milk"]


def test_generate_unknown_plan(client):
    assert client.post("/api/grocery-lists/generate", json={"meal_plan_id": "nope"}).status_code == 404


def test_generate_from_week_data_is_not_saved(client, grocery_repo):
    resp = client.post("/api/grocery-lists/generate-grocery-list", json={"week_data": {
        "Monday": {"Breakfast": {"ingredients": [{"name": "Milk", "amount": "2 cups"}]}},
        "Tuesday": {"Snacks": {"ingredients": [{"name": "milk", "amount": "1 cup"}]}},
    }})
    assert resp.status_code == 200
    items = resp.json()["grocery_list"]
    assert items == [{"name": "Milk", "amount": "2 cups + 1 cup", "unit": "", "category": "Other"}]
    assert grocery_repo.list() == []


def test_week_data_required(client):
    assert client.post("/api/grocery-lists/generate-grocery-list", json={"week_data": {}}).status_code == 400


def test_crud_and_item_updates(client):
    resp = client.post("/api/grocery-lists/", json={
        "user_id": "user-1",
        "items": [
            {"name": "Apples", "amount": "6", "category": "Produce", "estimated_cost": 3},
            {"name": "Cheese", "category": "Weird", "estimated_cost": 4.5},
        ],
    })
    assert resp.status_code == 201, resp.text
    created = resp.json()
    assert created["total_estimated_cost"] == 7.5
    assert created["items"][1]["category"] == "Other"
    list_id = created["id"]
    item_id = created["items"][0]["id"]

    resp = client.put(f"/api/grocery-lists/{list_id}/items/{item_id}", json={"is_checked": True, "amount": "8"})
    item = resp.json()["items"][0]
    assert item["is_checked"] is True and item["amount"] == "8" and item["id"] == item_id

    assert client.put(f"/api/grocery-lists/{list_id}/items/missing", json={"is_checked": True}).status_code == 404

    resp = client.put(f"/api/grocery-lists/{list_id}/check-all", json={"checked": True})
    assert all(i["is_checked"] for i in resp.json()["items"])

    resp = client.put(f"/api/grocery-lists/{list_id}", json={"notes": "Saturday market", "is_active": False})
    assert resp.json()["notes"] == "Saturday market"
    assert resp.json()["is_active"] is False
    assert len(resp.json()["items"]) == 2

    listing = client.get("/api/grocery-lists/", params={"user_id": "user-1", "is_active": False}).json()
    assert listing["pagination"]["total"] == 1

    assert client.delete(f"/api/grocery-lists/{list_id}").status_code == 200
    assert client.get(f"/api/grocery-lists/{list_id}").status_code == 404


def test_item_without_name_rejected(client):
    resp = client.post("/api/grocery-lists/", json={"items": [{"name": "  "}]})
    assert resp.status_code == 400


def test_update_trims_notes_and_accepts_null(client):
    list_id = client.post("/api/grocery-lists/", json={"notes": "first"}).json()["id"]

    resp = client.put(f"/api/grocery-lists/{list_id}", json={"notes": "  Saturday market  "})
    assert resp.json()["notes"] == "Saturday market"

    resp = client.put(f"/api/grocery-lists/{list_id}", json={"notes": None})
    assert resp.status_code == 200
    assert resp.json()["notes"] == ""

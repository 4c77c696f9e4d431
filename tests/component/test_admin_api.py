"""Component tests for the admin API over in-memory storage."""

import pytest
from fastapi.testclient import TestClient

from restaurant_admin_service.handlers.api_handler import create_app
from restaurant_admin_service.services.analytics_service import AnalyticsService
from restaurant_admin_service.services.menu_service import MenuService
from restaurant_admin_service.services.order_service import OrderService
from tests.fakes import InMemoryMenuRepository, InMemoryOrderRepository

AUTH = {"X-API-Key": "component-key"}

ICED_COFFEE = {
    "name": "Iced Coffee",
    "description": "Cold brew coffee over ice",
    "category": "Beverage",
    "price": 4.5,
    "ingredients": ["coffee", "ice", "milk"],
    "preparationTime": 3,
}


@pytest.mark.component
class TestAdminAPI:
    """End-to-end flows through the HTTP layer and services."""

    @pytest.fixture
    def client(self) -> TestClient:
        """App wired with real services and empty in-memory repositories."""
        menu_repository = InMemoryMenuRepository()
        order_repository = InMemoryOrderRepository()
        app = create_app(
            menu_service=MenuService(menu_repository=menu_repository),  # type: ignore[arg-type]
            order_service=OrderService(
                order_repository=order_repository,  # type: ignore[arg-type]
                menu_repository=menu_repository,  # type: ignore[arg-type]
            ),
            analytics_service=AnalyticsService(
                order_repository=order_repository,  # type: ignore[arg-type]
                menu_repository=menu_repository,  # type: ignore[arg-type]
            ),
            api_keys=["component-key"],
        )
        return TestClient(app)

    @pytest.fixture
    def menu_ids(self, client: TestClient, menu_item_payload: dict) -> tuple[str, str]:
        """Create a salad and a coffee and return their IDs."""
        salad = client.post("/api/menu", json=menu_item_payload, headers=AUTH)
        coffee = client.post("/api/menu", json=ICED_COFFEE, headers=AUTH)
        assert salad.status_code == 201
        assert coffee.status_code == 201
        return salad.json()["data"]["id"], coffee.json()["data"]["id"]

    def place_order(
        self, client: TestClient, lines: list[tuple[str, int, float]], total: float
    ) -> dict:
        response = client.post(
            "/api/orders",
            json={
                "items": [
                    {"menuItem": item_id, "quantity": quantity, "price": price}
                    for item_id, quantity, price in lines
                ],
                "totalAmount": total,
                "customerName": "Jane Smith",
                "tableNumber": 4,
            },
            headers=AUTH,
        )
        assert response.status_code == 201, response.json()
        return response.json()["data"]

    def test_menu_catalog_flow(self, client: TestClient, menu_ids: tuple[str, str]) -> None:
        """Test create, filter, search, toggle, update and delete."""
        salad_id, coffee_id = menu_ids

        listed = client.get("/api/menu").json()
        assert listed["count"] == 2

        beverages = client.get("/api/menu", params={"category": "Beverage"}).json()
        assert [item["id"] for item in beverages["data"]] == [coffee_id]

        cheap = client.get("/api/menu", params={"maxPrice": 5}).json()
        assert [item["price"] for item in cheap["data"]] == [4.5]

        found = client.get("/api/menu/search", params={"q": "PARMESAN"}).json()
        assert [item["id"] for item in found["data"]] == [salad_id]

        toggled = client.patch(f"/api/menu/{coffee_id}/availability", headers=AUTH).json()
        assert toggled["data"]["isAvailable"] is False
        unavailable = client.get("/api/menu", params={"availability": "false"}).json()
        assert [item["id"] for item in unavailable["data"]] == [coffee_id]

        updated = client.put(
            f"/api/menu/{salad_id}",
            json={"name": "House Salad", "category": "Appetizer", "price": 7.25},
            headers=AUTH,
        ).json()
        assert updated["data"]["name"] == "House Salad"
        assert updated["data"]["price"] == 7.25
        assert updated["data"]["ingredients"] == ["romaine lettuce", "parmesan", "croutons"]

        deleted = client.delete(f"/api/menu/{salad_id}", headers=AUTH)
        assert deleted.json() == {"success": True, "message": "Menu item deleted successfully"}
        missing = client.get(f"/api/menu/{salad_id}")
        assert missing.status_code == 404
        assert missing.json() == {"success": False, "message": "Menu item not found"}

    def test_invalid_menu_item_rejected(self, client: TestClient, menu_item_payload: dict) -> None:
        """Test that a bad category is a 400 and nothing is stored."""
        menu_item_payload["category"] = "Snack"

        response = client.post("/api/menu", json=menu_item_payload, headers=AUTH)

        assert response.status_code == 400
        assert response.json()["success"] is False
        assert client.get("/api/menu").json()["count"] == 0

    def test_numbers_dynamodb_cannot_store_rejected(
        self, client: TestClient, menu_ids: tuple[str, str]
    ) -> None:
        """Test that oversized prices and boolean quantities are a 400 and nothing is stored."""
        salad_id, _ = menu_ids

        huge_price = client.post(
            "/api/menu",
            json={"name": "Gold Leaf Cake", "category": "Dessert", "price": 1e200},
            headers=AUTH,
        )
        boolean_quantity = client.post(
            "/api/orders",
            json={
                "items": [{"menuItem": salad_id, "quantity": True, "price": 8.99}],
                "totalAmount": 8.99,
                "customerName": "Jane Smith",
                "tableNumber": True,
            },
            headers=AUTH,
        )
        huge_bound = client.get("/api/menu", params={"maxPrice": "1e200"})

        assert huge_price.status_code == 400
        assert huge_price.json()["message"].startswith('"price": must have at most 38')
        assert boolean_quantity.status_code == 400
        assert boolean_quantity.json()["message"] == '"items[0].quantity": must be a number'
        assert huge_bound.status_code == 400
        assert client.get("/api/menu").json()["count"] == 2
        assert client.get("/api/orders").json()["total"] == 0

    def test_order_lifecycle(self, client: TestClient, menu_ids: tuple[str, str]) -> None:
        """Test placing an order, reading it back and moving it through statuses."""
        salad_id, coffee_id = menu_ids

        order = self.place_order(client, [(salad_id, 2, 8.99), (coffee_id, 1, 4.5)], 22.48)

        assert order["status"] == "Pending"
        assert order["orderNumber"].startswith("ORD-")
        assert order["items"][0]["menuItem"]["name"] == "Caesar Salad"

        fetched = client.get(f"/api/orders/{order['id']}").json()["data"]
        assert fetched == order

        ready = client.patch(
            f"/api/orders/{order['id']}/status", json={"status": "Ready"}, headers=AUTH
        ).json()
        assert ready["data"]["status"] == "Ready"

        by_status = client.get("/api/orders", params={"status": "Ready"}).json()
        assert [entry["id"] for entry in by_status["data"]] == [order["id"]]
        assert client.get("/api/orders", params={"status": "Pending"}).json()["total"] == 0

        rejected = client.patch(
            f"/api/orders/{order['id']}/status", json={"status": "Shipped"}, headers=AUTH
        )
        assert rejected.status_code == 400
        assert client.get(f"/api/orders/{order['id']}").json()["data"]["status"] == "Ready"

    def test_order_validation(self, client: TestClient, menu_ids: tuple[str, str]) -> None:
        """Test that totals and menu references are checked before storing."""
        salad_id, _ = menu_ids

        mismatch = client.post(
            "/api/orders",
            json={
                "items": [{"menuItem": salad_id, "quantity": 2, "price": 8.99}],
                "totalAmount": 50,
                "customerName": "Jane Smith",
            },
            headers=AUTH,
        )
        unknown = client.post(
            "/api/orders",
            json={
                "items": [{"menuItem": "missing", "quantity": 1, "price": 1}],
                "totalAmount": 1,
                "customerName": "Jane Smith",
            },
            headers=AUTH,
        )

        assert mismatch.status_code == 400
        assert unknown.status_code == 400
        assert unknown.json()["message"] == "Menu item missing not found"
        assert client.get("/api/orders").json()["total"] == 0

    def test_order_pagination(self, client: TestClient, menu_ids: tuple[str, str]) -> None:
        """Test that the second page holds the remainder."""
        _, coffee_id = menu_ids
        for _ in range(12):
            self.place_order(client, [(coffee_id, 1, 4.5)], 4.5)

        first = client.get("/api/orders").json()
        second = client.get("/api/orders", params={"page": 2, "limit": 10}).json()

        assert (first["count"], first["total"], first["pages"]) == (10, 12, 2)
        assert (second["count"], second["page"]) == (2, 2)
        first_ids = {entry["id"] for entry in first["data"]}
        assert first_ids.isdisjoint(entry["id"] for entry in second["data"])

    def test_top_sellers_follow_orders_and_deletes(
        self, client: TestClient, menu_ids: tuple[str, str]
    ) -> None:
        """Test ranking by quantity and that deleted items drop out."""
        salad_id, coffee_id = menu_ids
        self.place_order(client, [(salad_id, 2, 8.99), (coffee_id, 1, 4.5)], 22.48)
        self.place_order(client, [(coffee_id, 3, 4.5)], 13.5)

        report = client.get("/api/analytics/top-sellers").json()["data"]

        assert [(row["menuItemId"], row["totalQuantity"]) for row in report] == [
            (coffee_id, 4),
            (salad_id, 2),
        ]
        assert report[0]["totalRevenue"] == 18
        assert report[0]["category"] == "Beverage"

        client.delete(f"/api/menu/{coffee_id}", headers=AUTH)

        report = client.get("/api/analytics/top-sellers").json()["data"]
        assert [row["menuItemId"] for row in report] == [salad_id]

        orders = client.get("/api/orders").json()["data"]
        coffee_lines = [
            line for order in orders for line in order["items"] if line["menuItemId"] == coffee_id
        ]
        assert coffee_lines
        assert all(line["menuItem"] is None for line in coffee_lines)

    def test_writes_require_api_key(self, client: TestClient, menu_item_payload: dict) -> None:
        """Test that reads are public and writes need the key."""
        assert client.get("/api/menu").status_code == 200
        assert client.get("/api/orders").status_code == 200
        assert client.post("/api/menu", json=menu_item_payload).status_code == 401
        assert client.post("/api/orders", json={}).status_code == 401

"""Unit tests for the sample data loader."""

import os
import random
from datetime import datetime
from decimal import Decimal
from unittest.mock import MagicMock, Mock, call, patch

import pytest
from botocore.exceptions import ClientError

from restaurant_admin_service.models.menu_models import MenuItem
from restaurant_admin_service.seeding import (
    SAMPLE_MENU_ITEMS,
    build_menu_items,
    build_sample_orders,
    clear_table,
    ensure_table,
    seed_database,
)
import src.seed as seed_module
from src.seed import main


def client_error(code: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, "CreateTable")


@pytest.mark.unit
class TestBuildSampleData:
    """Tests for sample menu and order generation."""

    @pytest.fixture
    def menu_items(self, fixed_time: datetime) -> list[MenuItem]:
        """The validated sample menu."""
        return build_menu_items(fixed_time)

    def test_menu_items_pass_validation(self, menu_items: list[MenuItem]) -> None:
        """Test that every sample item becomes a stored record."""
        assert len(menu_items) == len(SAMPLE_MENU_ITEMS) == 15
        assert len({item.id for item in menu_items}) == 15
        assert menu_items[0].name == "Caesar Salad"
        assert menu_items[0].price == Decimal("8.99")
        assert all(item.is_available for item in menu_items)

    def test_orders_snapshot_prices_and_totals(
        self, menu_items: list[MenuItem], fixed_time: datetime
    ) -> None:
        """Test that line prices and totals are consistent with the menu."""
        prices = {item.id: item.price for item in menu_items}

        orders = build_sample_orders(menu_items, rng=random.Random(42), now=fixed_time)

        assert len(orders) == 10
        for order in orders:
            assert 1 <= len(order.items) <= 3
            for line in order.items:
                assert 1 <= line.quantity <= 3
                assert line.price == prices[line.menu_item_id]
            expected = sum(line.price * line.quantity for line in order.items)
            assert order.total_amount == expected
            assert 1 <= order.table_number <= 20

    def test_orders_are_newest_first_with_unique_numbers(
        self, menu_items: list[MenuItem], fixed_time: datetime
    ) -> None:
        """Test creation times step back one minute per order."""
        orders = build_sample_orders(menu_items, count=5, rng=random.Random(1), now=fixed_time)

        assert orders[0].created_at == fixed_time
        assert all(a.created_at > b.created_at for a, b in zip(orders, orders[1:]))
        assert len({order.order_number for order in orders}) == 5
        assert orders[0].order_number.startswith("ORD-1705314600000-")

    def test_same_seed_same_orders(self, menu_items: list[MenuItem], fixed_time: datetime) -> None:
        """Test that a seeded random source is reproducible."""
        first = build_sample_orders(menu_items, rng=random.Random(7), now=fixed_time)
        second = build_sample_orders(menu_items, rng=random.Random(7), now=fixed_time)

        assert [order.items for order in first] == [order.items for order in second]
        assert [order.status for order in first] == [order.status for order in second]


@pytest.mark.unit
class TestTables:
    """Tests for table creation and clearing."""

    def test_ensure_table_creates_and_waits(self) -> None:
        """Test that a missing table is created keyed by id."""
        resource = MagicMock()

        ensure_table(resource, "menu")

        kwargs = resource.create_table.call_args.kwargs
        assert kwargs["TableName"] == "menu"
        assert kwargs["KeySchema"] == [{"AttributeName": "id", "KeyType": "HASH"}]
        assert kwargs["BillingMode"] == "PAY_PER_REQUEST"
        resource.create_table.return_value.wait_until_exists.assert_called_once()

    def test_ensure_table_skips_existing(self) -> None:
        """Test that an existing table is left alone."""
        resource = MagicMock()
        resource.create_table.side_effect = client_error("ResourceInUseException")

        ensure_table(resource, "menu")

    def test_ensure_table_propagates_other_errors(self) -> None:
        """Test that unexpected errors are raised."""
        resource = MagicMock()
        resource.create_table.side_effect = client_error("AccessDeniedException")

        with pytest.raises(ClientError):
            ensure_table(resource, "menu")

    def test_clear_table_deletes_every_page(self) -> None:
        """Test that all scanned keys are deleted in a batch."""
        table = MagicMock()
        table.scan.side_effect = [
            {"Items": [{"id": "a"}, {"id": "b"}], "LastEvaluatedKey": {"id": "b"}},
            {"Items": [{"id": "c"}]},
        ]
        batch = table.batch_writer.return_value.__enter__.return_value

        deleted = clear_table(table)

        assert deleted == 3
        assert table.scan.call_args_list[1].kwargs["ExclusiveStartKey"] == {"id": "b"}
        batch.delete_item.assert_has_calls(
            [call(Key={"id": "a"}), call(Key={"id": "b"}), call(Key={"id": "c"})]
        )


@pytest.mark.unit
class TestSeedDatabase:
    """Tests for the full seed run."""

    def test_seeds_menu_and_orders(self) -> None:
        """Test that both tables are cleared and filled."""
        resource = MagicMock()
        table = resource.Table.return_value
        table.scan.return_value = {"Items": []}

        counts = seed_database(resource, "menu", "orders", rng=random.Random(3))

        assert counts == (15, 10)
        resource.Table.assert_any_call("menu")
        resource.Table.assert_any_call("orders")
        assert table.put_item.call_count == 25
        resource.create_table.assert_not_called()

    def test_creates_tables_when_asked(self) -> None:
        """Test that --create-tables creates both tables first."""
        resource = MagicMock()
        resource.Table.return_value.scan.return_value = {"Items": []}

        seed_database(resource, "menu", "orders", create_tables=True)

        names = [c.kwargs["TableName"] for c in resource.create_table.call_args_list]
        assert names == ["menu", "orders"]


@pytest.mark.unit
class TestSeedCommand:
    """Tests for the seed command line entry point."""

    @patch("src.seed.configure_logging")
    @patch("src.seed.create_dynamodb_resource")
    @patch("src.seed.seed_database")
    @patch.dict(os.environ, {"DYNAMODB_MENU_ITEMS_TABLE": "local-menu"}, clear=True)
    def test_runs_seed(
        self, mock_seed: Mock, mock_create_dynamodb: Mock, mock_configure_logging: Mock
    ) -> None:
        """Test that the command passes table names and the flag through."""
        mock_seed.return_value = (15, 10)

        assert main(["--create-tables"]) == 0

        mock_seed.assert_called_once_with(
            mock_create_dynamodb.return_value,
            menu_table="local-menu",
            orders_table="restaurant-orders",
            create_tables=True,
        )

    @patch("src.seed.configure_logging")
    @patch("src.seed.create_dynamodb_resource")
    @patch("src.seed.seed_database")
    def test_returns_error_code_on_failure(
        self, mock_seed: Mock, mock_create_dynamodb: Mock, mock_configure_logging: Mock
    ) -> None:
        """Test that a failed seed exits non-zero."""
        mock_seed.side_effect = RuntimeError("table missing")

        assert main([]) == 1

    @patch("src.seed.configure_logging")
    @patch("src.seed.seed_database")
    @patch("restaurant_admin_service.repositories.dynamodb.boto3.resource")
    @patch.dict(
        os.environ,
        {
            "DYNAMODB_ENDPOINT": "http://localhost:8000",
            "AWS_ACCESS_KEY_ID": "local-key",
            "AWS_SECRET_ACCESS_KEY": "local-secret",
        },
        clear=True,
    )
    def test_builds_own_resource_outside_lambda_cache(
        self, mock_boto3_resource: Mock, mock_seed: Mock, mock_configure_logging: Mock
    ) -> None:
        """Test that the command connects to local DynamoDB without the Lambda container cache."""
        mock_seed.return_value = (15, 10)

        assert main([]) == 0

        mock_boto3_resource.assert_called_once_with(
            "dynamodb",
            endpoint_url="http://localhost:8000",
            region_name="us-east-1",
            aws_access_key_id="local-key",
            aws_secret_access_key="local-secret",
        )
        assert mock_seed.call_args.args[0] is mock_boto3_resource.return_value
        assert not hasattr(seed_module, "get_dynamodb_resource")

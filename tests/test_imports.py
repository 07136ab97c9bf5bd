"""Tests for import chains and module integrity.

Ensures all public modules can be imported without errors and
that re-exports from __init__.py files work correctly.
"""


class TestSchemaImports:
    def test_import_catalog_schema(self):
        from storefront.schemas.catalog_schema import Category, Period, Service, TimeSlot
        assert Category.HUNTING == "hunting"
        assert Period.NIGHT == "night"

    def test_import_cart_schema(self):
        from storefront.schemas.cart_schema import CartSnapshot
        assert CartSnapshot().version == 0

    def test_import_booking_schema(self):
        from storefront.schemas.booking_schema import BookingStatus, PaymentMethod
        assert BookingStatus.PENDING == "pending"
        assert PaymentMethod.SBP == "sbp"

    def test_camel_case_wire_format(self):
        from storefront.schemas.cart_schema import DateRange
        assert DateRange(start_date="a", end_date="b").to_wire() == {"startDate": "a", "endDate": "b"}
        assert DateRange.model_validate({"startDate": "a", "endDate": "b"}).start_date == "a"


class TestPackageReExports:
    def test_store_package(self):
        from storefront.store import CartStore, InMemoryKVStore, KVStore
        assert issubclass(InMemoryKVStore, KVStore)
        assert CartStore is not None

    def test_booking_package(self):
        from storefront.booking import BookingLifecycle, get_registered_methods
        assert BookingLifecycle.INITIAL_STATUS == "pending"
        assert len(get_registered_methods()) == 3

    def test_catalog_package(self):
        from storefront.catalog import SlotSelection, generate_availability
        assert callable(generate_availability)
        assert SlotSelection is not None

    def test_client_package(self):
        from storefront.client import build_client, CartService, CurrencyService
        assert callable(build_client)


class TestAppImports:
    def test_create_app_routes(self):
        from storefront.api.app import create_app
        from storefront.container import build_backend
        from storefront.store.kv_store import InMemoryKVStore

        app = create_app(build_backend(store=InMemoryKVStore()))
        paths = {route.path for route in app.routes}
        assert any(p.endswith("/health") for p in paths)
        assert any(p.endswith("/cart/{user_id}/clear") for p in paths)

    def test_entry_points_import(self):
        import console_demo
        import main
        assert callable(main.main)
        assert "checkout" in console_demo.ShoppingSession.SCENARIOS

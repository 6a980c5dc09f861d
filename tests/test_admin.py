"""Tests for admin edits and their effect on the session and derived views."""
import pytest

from conftest import make_product
from errors import DuplicateProductError
from session import CatalogSession
from tools.admin import CatalogAdmin
from tools.ranking import compute_featured, suggestion_order
from tools.search import SearchTier, search
from tools.storage import MemoryStorage, PersistentStore


@pytest.fixture
def session(store, catalog):
    return CatalogSession(store=store, products=list(catalog), products_loaded=True)


class TestUpsert:
    def test_existing_name_replaced_in_place(self, session):
        admin = CatalogAdmin(session)
        admin.upsert(make_product("Urban Glide", "scooter", price="$499"))

        names = [p.name for p in session.products]
        assert names.index("Urban Glide") == 2
        assert session.find_product("Urban Glide").price == "$499"
        assert len(session.products) == 5

    def test_new_name_prepended(self, session):
        CatalogAdmin(session).upsert(make_product("Cargo Hauler", "e-bike"))

        assert session.products[0].name == "Cargo Hauler"
        assert len(session.products) == 6

    def test_rename_keeps_position(self, session):
        CatalogAdmin(session).upsert(make_product("Urban Glide 2", "scooter"), original_name="Urban Glide")

        names = [p.name for p in session.products]
        assert names[2] == "Urban Glide 2"
        assert "Urban Glide" not in names

    def test_rename_onto_existing_name_rejected(self, session):
        with pytest.raises(DuplicateProductError):
            CatalogAdmin(session).upsert(make_product("Electro Max", "scooter"), original_name="Urban Glide")
        assert [p.name for p in session.products][2] == "Urban Glide"

    def test_persisted_as_override(self, session, store):
        CatalogAdmin(session).upsert(make_product("Cargo Hauler", "e-bike"))
        assert store.managed_products() == session.products

    def test_revision_bumped(self, session):
        before = session.revision
        CatalogAdmin(session).upsert(make_product("Cargo Hauler", "e-bike"))
        assert session.revision == before + 1


class TestRemove:
    def test_remove_drops_product(self, session, store):
        CatalogAdmin(session).remove("Urban Glide")

        assert session.find_product("Urban Glide") is None
        assert [p.name for p in store.managed_products()] == [p.name for p in session.products]

    def test_unknown_name_is_noop_on_contents(self, session):
        CatalogAdmin(session).remove("Nope")
        assert len(session.products) == 5


class TestDerivedViews:
    def test_search_and_ranking_see_edits(self, session, store):
        admin = CatalogAdmin(session)
        store.increment_click("Trail Runner")

        admin.upsert(make_product("Velo", "bmx"))
        assert search("bmx", session.products).tier == SearchTier.EXACT_TYPE

        admin.remove("Trail Runner")
        featured = compute_featured(session.products, store.click_counts())
        assert "Trail Runner" not in [p.name for p in featured]
        assert "bmx" in [s.type for s in suggestion_order(session.products, store.click_counts())]


class TestPersistFailure:
    def test_failed_save_reports_but_keeps_session_edit(self, catalog):
        store = PersistentStore(MemoryStorage(quota_bytes=10))
        session = CatalogSession(store=store, products=list(catalog))

        ok = CatalogAdmin(session).upsert(make_product("Cargo Hauler", "e-bike"))

        assert ok is False
        assert session.products[0].name == "Cargo Hauler"
        assert store.managed_products() is None
        assert store.last_warning

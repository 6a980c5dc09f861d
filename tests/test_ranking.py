"""Tests for featured ranking, pagination and trend suggestions."""
import pytest

from conftest import make_product
from tools.ranking import compute_featured, paginate, suggestion_order, trend_score


class TestFeatured:
    def test_ties_keep_collection_order(self):
        products = [make_product("A"), make_product("B"), make_product("C")]
        featured = compute_featured(products, {"A": 3, "B": 9, "C": 9})

        assert [p.name for p in featured] == ["B", "C", "A"]

    def test_unclicked_products_keep_order_at_the_end(self):
        products = [make_product(n) for n in "PQRST"]
        featured = compute_featured(products, {"S": 1})

        assert [p.name for p in featured] == ["S", "P", "Q", "R", "T"]

    def test_truncated_to_max_items(self):
        products = [make_product(f"P{i}") for i in range(20)]
        featured = compute_featured(products, {}, max_items=12)

        assert len(featured) == 12
        assert featured[0].name == "P0"
        assert featured[-1].name == "P11"

    def test_sorted_non_increasing(self):
        products = [make_product(f"P{i}") for i in range(10)]
        clicks = {f"P{i}": (i * 7) % 5 for i in range(10)}
        counts = [clicks[p.name] for p in compute_featured(products, clicks)]

        assert counts == sorted(counts, reverse=True)

    def test_empty_catalog(self):
        assert compute_featured([], {"A": 1}) == []


class TestPaginate:
    def test_first_page(self):
        page = paginate(list(range(12)), 5, 1)

        assert page.items == [0, 1, 2, 3, 4]
        assert page.current_page == 1
        assert page.total_pages == 3
        assert page.total_items == 12

    def test_page_clamped_high(self):
        page = paginate(list(range(12)), 5, 99)

        assert page.current_page == 3
        assert page.items == [10, 11]

    def test_page_clamped_low(self):
        assert paginate(list(range(12)), 5, 0).current_page == 1
        assert paginate(list(range(12)), 5, -4).current_page == 1

    def test_empty_sequence(self):
        page = paginate([], 6, 3)

        assert page.items == []
        assert page.current_page == 1
        assert page.total_pages == 0

    def test_pages_cover_everything_once(self):
        items = list(range(23))
        pages = paginate(items, 4, 1).total_pages
        joined = [x for n in range(1, pages + 1) for x in paginate(items, 4, n).items]

        assert joined == items

    def test_rejects_non_positive_page_size(self):
        with pytest.raises(ValueError):
            paginate([1], 0, 1)


class TestTrends:
    @pytest.fixture
    def products(self):
        return [
            make_product("Bike A", "e-bike"),
            make_product("Scooter A", "scooter"),
            make_product("Bike B", "e-bike"),
            make_product("Helmet A", "helmet"),
            make_product("Battery", ""),
            make_product("Blank", "   "),
        ]

    def test_trend_score_sums_type(self, products):
        clicks = {"Bike A": 2, "Bike B": 5, "Scooter A": 4}
        assert trend_score("e-bike", products, clicks) == 7
        assert trend_score("helmet", products, clicks) == 0

    def test_suggestions_hottest_first(self, products):
        clicks = {"Bike A": 2, "Bike B": 5, "Scooter A": 4, "Helmet A": 9}
        order = suggestion_order(products, clicks)

        assert [(s.type, s.score) for s in order] == [("helmet", 9), ("e-bike", 7), ("scooter", 4)]

    def test_ties_keep_first_seen_type_order(self, products):
        order = suggestion_order(products, {})
        assert [s.type for s in order] == ["e-bike", "scooter", "helmet"]

    def test_display_score_applies_multiplier(self, products):
        order = suggestion_order(products, {"Bike A": 5}, display_multiplier=1.6)
        assert order[0].score == 5
        assert order[0].display_score == 8

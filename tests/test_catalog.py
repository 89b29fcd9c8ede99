import itertools
import unittest

from smartstock.schemas.inventory import Product
from smartstock.services.catalog_service import (
    ProductFilter,
    filter_products,
    matches_category,
    matches_search,
    matches_site,
    sort_products,
)


def catalog():
    rows = [
        ("1", "Bonbons", "Alimentaire", 15, 20, 2.5, "S1"),
        ("2", "biscuits", "Alimentaire", 8, 15, 3.0, "S2"),
        ("3", "Jus de fruit", "Boisson", 12, 10, 4.5, "S1"),
        ("4", "Assiettes jetables", "Matériel", 50, 30, 0.5, "S2"),
        ("5", "Nappes", "Décoration", 10, 5, 12.0, "S1"),
        ("6", "Bonbons menthe", "Alimentaire", 30, 10, 2.5, "S2"),
    ]
    return [
        Product(
            id=pid,
            name=name,
            category=category,
            current_stock=stock,
            min_stock=minimum,
            unit_price=price,
            site_id=site,
        )
        for pid, name, category, stock, minimum, price, site in rows
    ]


def ids(products):
    return [product.id for product in products]


class FilterTest(unittest.TestCase):
    def test_default_filter_matches_everything(self):
        self.assertEqual(ids(filter_products(catalog())), ["1", "2", "3", "4", "5", "6"])

    def test_search_is_case_insensitive_substring(self):
        result = filter_products(catalog(), ProductFilter(search="BONB"))
        self.assertEqual(ids(result), ["1", "6"])

    def test_match_all_sentinels(self):
        products = catalog()
        for value in (None, "", "all", "Toutes"):
            self.assertEqual(len(filter_products(products, ProductFilter(category=value))), 6)
            self.assertEqual(len(filter_products(products, ProductFilter(site_id=value))), 6)

    def test_status_buckets(self):
        products = catalog()
        alert = ids(filter_products(products, ProductFilter(status="alert")))
        sufficient = ids(filter_products(products, ProductFilter(status="sufficient")))

        self.assertEqual(alert, ["1", "2"])
        self.assertEqual(sufficient, ["3", "4", "5", "6"])

    def test_price_and_value_ranges_are_inclusive(self):
        products = catalog()
        by_price = filter_products(products, ProductFilter(min_price=2.5, max_price=4.5))
        by_value = filter_products(products, ProductFilter(min_value=75, max_value=120))

        self.assertEqual(ids(by_price), ["1", "2", "3", "6"])
        # 37.5, 24, 54, 25, 120, 75
        self.assertEqual(ids(by_value), ["5", "6"])

    def test_combined_predicates_are_anded(self):
        result = filter_products(
            catalog(),
            ProductFilter(search="bon", site_id="S2", category="Alimentaire", status="sufficient"),
        )
        self.assertEqual(ids(result), ["6"])

    def test_predicate_order_does_not_matter(self):
        products = catalog()
        steps = [
            lambda items: [p for p in items if matches_site(p, "S1")],
            lambda items: [p for p in items if matches_category(p, "Alimentaire")],
            lambda items: [p for p in items if matches_search(p, "bon")],
        ]
        results = set()
        for order in itertools.permutations(steps):
            items = products
            for step in order:
                items = step(items)
            results.add(tuple(ids(items)))

        combined = filter_products(
            products, ProductFilter(search="bon", site_id="S1", category="Alimentaire")
        )
        self.assertEqual(results, {tuple(ids(combined))})


class SortTest(unittest.TestCase):
    def test_name_sort_is_case_insensitive(self):
        result = sort_products(catalog(), "name", "asc")
        self.assertEqual(
            [p.name for p in result],
            ["Assiettes jetables", "biscuits", "Bonbons", "Bonbons menthe", "Jus de fruit", "Nappes"],
        )

    def test_numeric_sorts_both_directions(self):
        self.assertEqual(ids(sort_products(catalog(), "stock", "asc")), ["2", "5", "3", "1", "6", "4"])
        self.assertEqual(ids(sort_products(catalog(), "stock", "desc")), ["4", "6", "1", "3", "5", "2"])

    def test_ties_keep_input_order(self):
        self.assertEqual(ids(sort_products(catalog(), "price", "asc")), ["4", "1", "6", "2", "3", "5"])
        self.assertEqual(
            ids(sort_products(catalog(), "category", "asc")),
            ["1", "2", "6", "3", "5", "4"],
        )

    def test_unknown_key_keeps_order(self):
        self.assertEqual(ids(sort_products(catalog(), "weight")), ["1", "2", "3", "4", "5", "6"])


if __name__ == "__main__":
    unittest.main()

import tempfile
import unittest
from pathlib import Path

from openpyxl import Workbook

from smartstock.config import Settings
from smartstock.schemas.inventory import Site
from smartstock.services.ingestion_service import (
    import_spreadsheet,
    normalize_header,
    read_spreadsheet,
    rows_from_table,
)
from smartstock.services.inventory_store import InventoryStore


def make_store():
    return InventoryStore(
        sites=[Site(id="S1", name="Siège Social"), Site(id="S2", name="Annexe Nord")],
        categories=["Alimentaire", "Boisson", "Autre"],
        settings=Settings(),
    )


class HeaderTest(unittest.TestCase):
    def test_header_aliases(self):
        self.assertEqual(normalize_header("Désignation"), "name")
        self.assertEqual(normalize_header("Qty"), "current_stock")
        self.assertEqual(normalize_header("Min Stock"), "min_stock")
        self.assertEqual(normalize_header("Prix Unit."), "unit_price")
        self.assertEqual(normalize_header("Monthly-Need"), "monthly_need")
        self.assertEqual(normalize_header("Fournisseur"), "supplier")
        self.assertEqual(normalize_header("Couleur"), "couleur")
        self.assertEqual(normalize_header(None), "")

    def test_rows_skip_blank_and_total_lines(self):
        rows, columns = rows_from_table(
            [
                ("Name", "Stock", "Price"),
                ("Bonbons", 15, 2.5),
                (None, None, None),
                ("", 4, 1),
                ("TOTAL", 15, None),
            ]
        )

        self.assertEqual(columns, {"name", "current_stock", "unit_price"})
        self.assertEqual(rows, [{"name": "Bonbons", "current_stock": 15, "unit_price": 2.5}])


class SpreadsheetImportTest(unittest.TestCase):
    def test_xlsx_import_creates_products(self):
        workbook = Workbook()
        worksheet = workbook.active
        worksheet.append(["Désignation", "Catégorie", "Quantité", "Seuil", "Prix", "Devise"])
        worksheet.append(["Bonbons", "Alimentaire", 15, 20, 2.5, "$"])
        worksheet.append(["Eau minérale", "boisson", "24", None, "0,8", "Fc"])
        worksheet.append(["Total", None, 39, None, None, None])

        with tempfile.TemporaryDirectory() as tmp_dir:
            path = Path(tmp_dir) / "stock.xlsx"
            workbook.save(path)
            store = make_store()

            result = import_spreadsheet(store, path, site_id="S2", actor="Import")

        self.assertEqual(result, {"rows": 2, "imported": 2, "skipped": 0})
        products = store.products
        self.assertEqual([p.name for p in products], ["Bonbons", "Eau minérale"])
        self.assertEqual(products[1].category, "Boisson")
        self.assertEqual(products[1].current_stock, 24)
        self.assertEqual(products[1].min_stock, 10)
        self.assertEqual(products[1].unit_price, 0.8)
        self.assertEqual(products[1].currency, "Fc")
        self.assertTrue(all(p.site_id == "S2" for p in products))
        self.assertEqual(len(store.logs), 2)
        self.assertTrue(all(log.responsible == "Import" for log in store.logs))

    def test_csv_dry_run_leaves_store_unchanged(self):
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = Path(tmp_dir) / "stock.csv"
            path.write_text("nom;stock;prix\nSel;3;1.2\nPoivre;1;4\n", encoding="utf-8")
            rows = read_spreadsheet(path)
            store = make_store()

            result = import_spreadsheet(store, path, dry_run=True)

        self.assertEqual(len(rows), 2)
        self.assertEqual(result["imported"], 2)
        self.assertEqual(store.products, [])

    def test_missing_name_column_rejected(self):
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = Path(tmp_dir) / "stock.csv"
            path.write_text("stock,prix\n3,1.2\n", encoding="utf-8")
            with self.assertRaises(ValueError):
                read_spreadsheet(path)

    def test_unsupported_or_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            read_spreadsheet("/nonexistent/stock.xlsx")
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = Path(tmp_dir) / "stock.txt"
            path.write_text("name\nSel\n", encoding="utf-8")
            with self.assertRaises(ValueError):
                read_spreadsheet(path)


if __name__ == "__main__":
    unittest.main()

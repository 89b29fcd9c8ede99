import json
import tempfile
import unittest
from pathlib import Path

from fastapi.testclient import TestClient

from smartstock.config import Settings
from smartstock.core.constants import KEY_HISTORY, KEY_PRODUCTS
from smartstock.database.kv_store import MemoryKeyValueStore
from smartstock.dependencies import get_app_settings
from smartstock.main import create_app


class ApiTestCase(unittest.TestCase):
    def setUp(self):
        self.backend = MemoryKeyValueStore()
        self.app = create_app(backend=self.backend)
        self.client = TestClient(self.app)
        self.client.__enter__()

    def tearDown(self):
        self.client.__exit__(None, None, None)


class ProductRoutesTest(ApiTestCase):
    def test_health(self):
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "ok")

    def test_list_filters_and_sorts(self):
        response = self.client.get(
            "/products", params={"status": "alert", "sort": "stock", "order": "desc"}
        )

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual([p["id"] for p in body], ["1", "2"])
        self.assertIn("currentStock", body[0])

    def test_invalid_sort_key_rejected(self):
        self.assertEqual(self.client.get("/products", params={"sort": "weight"}).status_code, 422)

    def test_create_update_delete(self):
        created = self.client.post("/products", json={"name": "Serviettes", "currentStock": 6})
        self.assertEqual(created.status_code, 201)
        product_id = created.json()["id"]
        self.assertEqual(created.json()["minStock"], 10)

        updated = self.client.patch(f"/products/{product_id}", json={"unitPrice": 1.25})
        self.assertEqual(updated.json()["unitPrice"], 1.25)
        self.assertEqual(updated.json()["currentStock"], 6)

        self.assertEqual(self.client.delete(f"/products/{product_id}").status_code, 204)
        self.assertEqual(self.client.get(f"/products/{product_id}").status_code, 404)
        history = self.client.get("/history", params={"productId": product_id}).json()
        self.assertEqual(len(history), 1)
        self.assertEqual(history[0]["productName"], "Serviettes")

    def test_patch_validation_and_clearing(self):
        self.assertEqual(self.client.patch("/products/1", json={"name": ""}).status_code, 422)

        cleared = self.client.patch("/products/1", json={"supplier": None})

        self.assertEqual(cleared.status_code, 200)
        self.assertIsNone(cleared.json()["supplier"])
        self.assertEqual(cleared.json()["name"], "Bonbons")

    def test_exit_clamps_and_persists(self):
        response = self.client.post(
            "/products/2/movement", json={"quantity": 100, "movement": "exit"}
        )

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["product"]["currentStock"], 0)
        self.assertEqual(body["log"]["changeAmount"], -100)
        self.assertEqual(body["log"]["finalStock"], 0)

        stored = json.loads(self.backend.get(KEY_PRODUCTS))
        self.assertEqual(next(p for p in stored if p["id"] == "2")["currentStock"], 0)
        self.assertEqual(len(json.loads(self.backend.get(KEY_HISTORY))), 1)

    def test_unknown_product_returns_404(self):
        response = self.client.post("/products/nope/stock", json={"delta": 3})
        self.assertEqual(response.status_code, 404)
        self.assertIsNone(self.backend.get(KEY_HISTORY))

    def test_transfer(self):
        response = self.client.post(
            "/products/4/transfer", json={"quantity": 10, "toSiteId": "S2"}
        )

        body = response.json()
        self.assertEqual(body["transferred"], 10)
        self.assertEqual(body["source"]["currentStock"], 40)
        self.assertEqual(body["target"]["siteId"], "S2")


class ReplenishmentRoutesTest(ApiTestCase):
    def test_list_and_refill(self):
        rows = self.client.get("/replenishment").json()
        self.assertEqual([row["product"]["id"] for row in rows], ["1", "2"])
        self.assertEqual(rows[0]["needed"], 25)

        refill = self.client.post("/replenishment/1/refill").json()
        self.assertTrue(refill["refilled"])
        self.assertEqual(refill["product"]["currentStock"], 40)

        again = self.client.post("/replenishment/1/refill").json()
        self.assertFalse(again["refilled"])

    def test_refill_all_and_dashboard(self):
        self.assertEqual(self.client.get("/dashboard/summary").json()["alertCount"], 2)

        result = self.client.post("/replenishment/refill-all", json={"responsible": "Chef"}).json()

        self.assertEqual(result["refilled"], 2)
        self.assertTrue(all(log["responsible"] == "Chef" for log in result["logs"]))
        self.assertEqual(self.client.get("/dashboard/summary").json()["alertCount"], 0)
        monthly = self.client.get("/history/monthly").json()
        self.assertEqual(len(monthly), 1)
        self.assertEqual(monthly[0]["inflow"], 25 + 27)


class SettingsAndFurnitureRoutesTest(ApiTestCase):
    def test_sites_and_categories(self):
        site = self.client.post("/sites", json={"name": "Dépôt"}).json()
        self.assertEqual(site["id"], "S3")
        self.assertEqual(len(self.client.get("/sites").json()), 3)

        categories = self.client.post("/categories", json={"name": "Hygiène"}).json()
        self.assertIn("Hygiène", categories)
        self.assertEqual(self.client.delete("/categories/Inconnue").status_code, 404)

    def test_furniture_count(self):
        created = self.client.post(
            "/furniture", json={"code": "CH-01", "name": "Chaise", "currentCount": 12}
        )
        self.assertEqual(created.status_code, 201)
        furniture_id = created.json()["id"]
        self.assertEqual(
            self.client.post("/furniture", json={"code": "CH-01"}).status_code, 409
        )

        counted = self.client.post(f"/furniture/{furniture_id}/count", json={"counted": 11}).json()

        self.assertEqual(counted["furniture"]["previousCount"], 12)
        self.assertEqual(counted["log"]["type"], "furniture_check")
        drift = self.client.get("/furniture", params={"driftOnly": True}).json()
        self.assertEqual([item["code"] for item in drift], ["CH-01"])

        blank = self.client.patch(f"/furniture/{furniture_id}", json={"code": ""})
        self.assertEqual(blank.status_code, 422)


class SpreadsheetRoutesTest(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.tmp_dir = tempfile.TemporaryDirectory()
        self.import_dir = Path(self.tmp_dir.name) / "imports"
        self.import_dir.mkdir()
        self.app.dependency_overrides[get_app_settings] = lambda: Settings(
            IMPORT_DIR=str(self.import_dir)
        )

    def tearDown(self):
        super().tearDown()
        self.tmp_dir.cleanup()

    def test_import_from_import_dir(self):
        (self.import_dir / "stock.csv").write_text("nom;stock;prix\nSel;3;1.2\n", encoding="utf-8")

        response = self.client.post("/ingest/spreadsheet", json={"path": "stock.csv"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["result"]["imported"], 1)
        self.assertEqual(len(self.client.get("/products").json()), 6)

    def test_paths_outside_import_dir_rejected(self):
        outside = Path(self.tmp_dir.name) / "secret.csv"
        outside.write_text("nom;stock;prix\nSel;3;1.2\n", encoding="utf-8")

        for path in (str(outside), "../secret.csv"):
            response = self.client.post("/ingest/spreadsheet", json={"path": path})
            self.assertEqual(response.status_code, 403)
        self.assertEqual(len(self.client.get("/products").json()), 5)


class AIRoutesTest(ApiTestCase):
    def test_ai_import_and_bad_payload(self):
        ok = self.client.post(
            "/ingest/ai-products",
            json={"payload": [{"name": "Gobelets", "currentStock": 40}], "siteId": "S2"},
        ).json()
        self.assertEqual(ok["imported"], 1)
        self.assertEqual(ok["products"][0]["siteId"], "S2")

        bad = self.client.post("/ingest/ai-products", json={"payload": {"name": "x"}})
        self.assertEqual(bad.status_code, 502)
        self.assertEqual(len(self.client.get("/products").json()), 6)

    def test_ai_report(self):
        report = self.client.post("/reports/ai", json={"summary": "RAS", "alerts": ["a"]}).json()
        self.assertEqual(report["summary"], "RAS")
        self.assertEqual(report["chartData"], [])
        self.assertEqual(self.client.post("/reports/ai", json=[1, 2]).status_code, 502)

    def test_ai_input(self):
        payload = self.client.get("/reports/ai-input", params={"window": 5}).json()
        self.assertEqual(len(payload["products"]), 5)
        self.assertEqual(payload["history"], [])


if __name__ == "__main__":
    unittest.main()

import os
import unittest

from fastapi import FastAPI
from fastapi.testclient import TestClient

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

from devcamper.core.request_logging import install_request_logging
from devcamper.main import app


class RequestLoggingTests(unittest.TestCase):
    def setUp(self):
        self.client = TestClient(app)

    def tearDown(self):
        self.client.close()

    def test_health_has_request_id(self):
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "ok")
        request_id = response.headers.get("x-request-id")
        self.assertIsNotNone(request_id)
        self.assertRegex(str(request_id), r"^[A-Za-z0-9._-]{1,128}$")

    def test_valid_request_id_is_preserved(self):
        external_request_id = "release-check-2026_10_19"
        response = self.client.get("/health", headers={"X-Request-ID": external_request_id})
        self.assertEqual(response.headers.get("x-request-id"), external_request_id)

    def test_invalid_request_id_is_replaced(self):
        bad_request_id = "bad id with spaces"
        response = self.client.get("/health", headers={"X-Request-ID": bad_request_id})
        response_request_id = response.headers.get("x-request-id")
        self.assertIsNotNone(response_request_id)
        self.assertNotEqual(response_request_id, bad_request_id)

    def test_error_response_is_logged_with_request_id(self):
        with self.assertLogs("devcamper.http", level="INFO") as logs:
            response = self.client.get("/api/v1/auth/me", headers={"X-Request-ID": "trace-401"})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"success": False, "error": "Not authorized to access this route"})
        self.assertEqual(response.headers.get("x-request-id"), "trace-401")
        self.assertTrue(any("status=401" in line and "request_id=trace-401" in line for line in logs.output))

    def test_failed_request_is_still_logged(self):
        failing_app = FastAPI()
        install_request_logging(failing_app)

        @failing_app.get("/boom")
        def boom():
            raise RuntimeError("boom")

        with TestClient(failing_app, raise_server_exceptions=False) as client:
            with self.assertLogs("devcamper.http", level="ERROR") as logs:
                response = client.get("/boom", headers={"X-Request-ID": "trace-500"})
        self.assertEqual(response.status_code, 500)
        self.assertTrue(any("GET /boom status=500" in line and "request_id=trace-500" in line for line in logs.output))


if __name__ == "__main__":
    unittest.main()

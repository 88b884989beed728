from __future__ import annotations

import unittest
from unittest.mock import MagicMock

from fastapi import FastAPI
from fastapi.testclient import TestClient

from codespace.repositories.factory import repository_factory
from codespace.routes.runtime import router as runtime_router
from codespace.services.runtime_state import mark_failed, mark_ready, mark_starting
from codespace.services.session_registry import SessionRegistry


class RuntimeRoutesTests(unittest.TestCase):
    def setUp(self) -> None:
        self.app = FastAPI()
        self.app.include_router(runtime_router)
        self.client = TestClient(self.app)
        mark_starting()

    def tearDown(self) -> None:
        mark_starting()

    def test_live_reports_phase_while_starting(self) -> None:
        body = self.client.get("/health/live").json()
        self.assertEqual(body["status"], "alive")
        self.assertEqual(body["runtime_status"], "starting")
        self.assertTrue(body["updated_at"].endswith("Z"))

    def test_ready_is_503_until_startup_finishes(self) -> None:
        resp = self.client.get("/health/ready")
        self.assertEqual(resp.status_code, 503)
        self.assertFalse(resp.json()["detail"]["ready"])

        mark_ready("memory")
        resp = self.client.get("/health/ready")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["storage_engine"], "memory")

    def test_failed_startup_is_visible(self) -> None:
        mark_failed("db init failed")
        body = self.client.get("/runtime/info").json()
        self.assertEqual(body["runtime_status"], "failed")
        self.assertEqual(body["last_error"], "db init failed")
        self.assertIsNone(body["ready_at"])

    def test_info_counts_open_sessions(self) -> None:
        generator = MagicMock()
        generator.is_configured.return_value = False
        registry = SessionRegistry(repository_factory("memory"), MagicMock(), generator)
        registry.open_console("/tmp")
        self.app.state.registry = registry
        self.app.state.generator = generator

        body = self.client.get("/runtime/info").json()
        self.assertEqual(body["sessions"], {"workspaces": 0, "consoles": 1})
        self.assertFalse(body["assistant_configured"])


if __name__ == "__main__":
    unittest.main()

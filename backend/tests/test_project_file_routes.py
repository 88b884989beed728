from __future__ import annotations

import unittest

from fastapi import FastAPI
from fastapi.testclient import TestClient

from codespace.middleware.validation import install_error_handlers
from codespace.repositories.factory import repository_factory
from codespace.routes.files import router as files_router
from codespace.routes.projects import router as projects_router


def _client() -> TestClient:
    app = FastAPI()
    install_error_handlers(app)
    app.include_router(projects_router)
    app.include_router(files_router)
    app.state.repositories = repository_factory("memory")
    return TestClient(app)


class ProjectRouteTests(unittest.TestCase):
    def setUp(self) -> None:
        self.client = _client()

    def test_create_and_fetch_project(self) -> None:
        resp = self.client.post("/projects", json={"name": "demo", "description": "d"})
        self.assertEqual(resp.status_code, 201)
        project = resp.json()
        self.assertEqual(project["id"], 1)
        self.assertEqual(project["isPublic"], False)

        self.assertEqual(self.client.get("/projects/1").json()["name"], "demo")
        self.assertEqual([p["id"] for p in self.client.get("/projects").json()], [1])

    def test_missing_project_is_404(self) -> None:
        self.assertEqual(self.client.get("/projects/9").status_code, 404)
        self.assertEqual(self.client.get("/projects/9/files").status_code, 404)
        self.assertEqual(self.client.delete("/projects/9").status_code, 404)

    def test_blank_name_is_400(self) -> None:
        resp = self.client.post("/projects", json={"name": "   "})
        self.assertEqual(resp.status_code, 400)
        self.assertIn("Validation error", resp.json()["detail"])

    def test_update_project(self) -> None:
        self.client.post("/projects", json={"name": "demo"})
        resp = self.client.put("/projects/1", json={"isPublic": True})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["isPublic"], True)
        self.assertEqual(resp.json()["name"], "demo")

    def test_delete_cascades_files(self) -> None:
        self.client.post("/projects", json={"name": "demo"})
        self.client.post("/files", json={"projectId": 1, "name": "a.js", "path": "/a.js", "kind": "file"})
        self.assertEqual(self.client.delete("/projects/1").status_code, 204)
        self.assertEqual(self.client.get("/files/1").status_code, 404)


class FileRouteTests(unittest.TestCase):
    def setUp(self) -> None:
        self.client = _client()
        self.client.post("/projects", json={"name": "demo"})

    def _create(self, **overrides):
        body = {"projectId": 1, "name": "a.js", "path": "/a.js", "kind": "file", "content": "let a;"}
        body.update(overrides)
        return self.client.post("/files", json=body)

    def test_create_file(self) -> None:
        resp = self._create()
        self.assertEqual(resp.status_code, 201)
        entry = resp.json()
        self.assertEqual(entry["kind"], "file")
        self.assertEqual(entry["language"], "javascript")
        self.assertEqual(self.client.get("/projects/1/files").json()[0]["path"], "/a.js")

    def test_directory_has_no_content_field(self) -> None:
        resp = self._create(name="src", path="/src", kind="directory", content="ignored")
        self.assertEqual(resp.status_code, 201)
        self.assertNotIn("content", resp.json())

    def test_schema_violations_are_400(self) -> None:
        self.assertEqual(self._create(path="a.js").status_code, 400)
        self.assertEqual(self._create(kind="link").status_code, 400)
        self.assertEqual(self._create(name="b.js").status_code, 400)

    def test_bad_path_message_names_the_field(self) -> None:
        resp = self._create(path="a.js")
        self.assertEqual(resp.status_code, 400)
        self.assertIn('at "path"', resp.json()["detail"])

    def test_duplicate_path_is_400(self) -> None:
        self._create()
        resp = self._create()
        self.assertEqual(resp.status_code, 400)
        self.assertIn("/a.js", resp.json()["detail"])

    def test_unknown_project_is_404(self) -> None:
        self.assertEqual(self._create(projectId=42).status_code, 404)

    def test_update_and_delete(self) -> None:
        self._create()
        resp = self.client.put("/files/1", json={"content": "let b;"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["content"], "let b;")
        self.assertEqual(self.client.put("/files/2", json={"content": "x"}).status_code, 404)

        self.assertEqual(self.client.delete("/files/1").status_code, 204)
        self.assertEqual(self.client.delete("/files/1").status_code, 404)


if __name__ == "__main__":
    unittest.main()

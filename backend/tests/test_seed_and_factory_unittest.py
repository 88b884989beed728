from __future__ import annotations

import unittest

from codespace.middleware.validation import validation_message
from codespace.models.schema import ProjectCreate
from codespace.repositories.factory import repository_factory
from codespace.repositories.memory_store import InMemoryStore
from codespace.services.seed import DEFAULT_PROJECT_NAME, SAMPLE_FILES, ensure_default_project


class RepositoryFactoryTests(unittest.TestCase):
    def test_memory_engine_shares_one_store(self) -> None:
        repos = repository_factory("memory")
        self.assertEqual(repos.engine, "memory")
        self.assertIsInstance(repos.projects, InMemoryStore)
        self.assertIs(repos.projects, repos.files)

    def test_engine_name_is_normalised(self) -> None:
        self.assertEqual(repository_factory("  MEMORY ").engine, "memory")

    def test_unknown_engine(self) -> None:
        with self.assertRaises(ValueError):
            repository_factory("sqlite")


class SeedTests(unittest.IsolatedAsyncioTestCase):
    async def test_seeds_empty_store_once(self) -> None:
        repos = repository_factory("memory")
        project = await ensure_default_project(repos)
        self.assertEqual(project.name, DEFAULT_PROJECT_NAME)
        files = await repos.files.list_files(project.id)
        self.assertEqual([f.path for f in files], [f"/{name}" for name, _, _ in SAMPLE_FILES])
        self.assertEqual(files[1].language, "javascript")

        self.assertIsNone(await ensure_default_project(repos))
        self.assertEqual(await repos.projects.count_projects(), 1)

    async def test_existing_projects_are_left_alone(self) -> None:
        repos = repository_factory("memory")
        await repos.projects.create_project(ProjectCreate(name="mine"))
        self.assertIsNone(await ensure_default_project(repos))


class ValidationMessageTests(unittest.TestCase):
    def test_joins_issues_with_locations(self) -> None:
        message = validation_message(
            [
                {"loc": ("body", "path"), "msg": "Value error, path must be absolute"},
                {"loc": ("body",), "msg": "Field required"},
            ]
        )
        self.assertEqual(
            message,
            'Validation error: Value error, path must be absolute at "path"; Field required',
        )


if __name__ == "__main__":
    unittest.main()

from __future__ import annotations

import asyncio
import unittest

from codespace.errors import NotFoundError, PersistenceError
from codespace.models.entries import FileEntry
from codespace.models.schema import FileCreate, ProjectCreate
from codespace.repositories.memory_store import InMemoryStore
from codespace.services import files as file_service
from codespace.services.workspace_session import CursorPosition, WorkspaceSession


class _FailingWrites(InMemoryStore):
    """Reads work; every update fails like an unreachable store."""

    async def update_file(self, file_id, patch):  # noqa: ANN001
        raise ConnectionError("store unavailable")


class WorkspaceSessionTests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self.store = InMemoryStore()
        self.project = await self.store.create_project(ProjectCreate(name="demo"))

    async def _add(self, path: str, kind: str = "file", content: str = "", store: InMemoryStore | None = None):
        target = store or self.store
        req = FileCreate(
            projectId=self.project.id,
            name=path.rsplit("/", 1)[-1],
            path=path,
            kind=kind,
            content=content,
        )
        return await file_service.create_entry(target, target, req)

    async def _session(self, store: InMemoryStore | None = None) -> WorkspaceSession:
        target = store or self.store
        return await WorkspaceSession.start(self.project.id, target, target)

    async def test_start_requires_project(self) -> None:
        with self.assertRaises(NotFoundError):
            await WorkspaceSession.start(404, self.store, self.store)

    async def test_first_file_is_opened_on_load(self) -> None:
        await self._add("/src", kind="directory")
        first = await self._add("/src/a.js")
        await self._add("/b.js")
        session = await self._session()
        self.assertEqual(session.active_entry.id, first.id)
        self.assertEqual([e.id for e in session.open_entries], [first.id])

    async def test_empty_project_has_no_active_entry(self) -> None:
        session = await self._session()
        self.assertIsNone(session.active_entry)
        self.assertEqual(session.rows(), [])
        self.assertEqual(session.status().language, "Plain Text")

    async def test_reopening_keeps_tab_order(self) -> None:
        a = await self._add("/a.js")
        b = await self._add("/b.js")
        c = await self._add("/c.js")
        session = await self._session()
        session.open_file(b)
        session.open_file(c)
        session.open_file(a)
        self.assertEqual([e.id for e in session.open_entries], [a.id, b.id, c.id])
        self.assertEqual(session.active_entry.id, a.id)

        session.close_file(a.id)
        session.open_file(a)
        self.assertEqual([e.id for e in session.open_entries], [b.id, c.id, a.id])

    async def test_directories_cannot_be_opened(self) -> None:
        folder = await self._add("/src", kind="directory")
        session = await self._session()
        self.assertFalse(session.open_file(folder))
        self.assertFalse(session.open_file_id(folder.id))

    async def test_closing_active_picks_last_remaining(self) -> None:
        a = await self._add("/a.js")
        b = await self._add("/b.js")
        c = await self._add("/c.js")
        session = await self._session()
        session.open_file(b)
        session.open_file(c)
        session.open_file(b)
        self.assertEqual(session.active_entry.id, b.id)

        self.assertTrue(session.close_file(b.id))
        self.assertEqual(session.active_entry.id, c.id)
        self.assertEqual([e.id for e in session.open_entries], [a.id, c.id])

    async def test_closing_inactive_keeps_active(self) -> None:
        a = await self._add("/a.js")
        b = await self._add("/b.js")
        session = await self._session()
        session.open_file(b)
        session.close_file(a.id)
        self.assertEqual(session.active_entry.id, b.id)
        self.assertFalse(session.close_file(a.id))

    async def test_closing_last_tab_clears_active(self) -> None:
        a = await self._add("/a.js")
        session = await self._session()
        session.close_file(a.id)
        self.assertIsNone(session.active_entry)
        self.assertEqual(session.open_entries, [])

    async def test_update_content_persists(self) -> None:
        a = await self._add("/a.js", content="old")
        session = await self._session()
        update = await session.update_content(a.id, "new")
        self.assertTrue(update.applied)
        self.assertTrue(update.persisted)
        self.assertFalse(update.diverged)
        self.assertEqual(session.active_entry.content, "new")
        self.assertEqual((await self.store.get_file(a.id)).content, "new")

    async def test_failed_write_keeps_local_copy(self) -> None:
        store = _FailingWrites()
        self.project = await store.create_project(ProjectCreate(name="demo"))
        a = await self._add("/a.js", content="old", store=store)
        session = await self._session(store)

        update = await session.update_content(a.id, "new")
        self.assertTrue(update.applied)
        self.assertFalse(update.persisted)
        self.assertTrue(update.diverged)
        self.assertEqual(update.error, "store unavailable")
        self.assertEqual(session.active_entry.content, "new")
        self.assertEqual((await store.get_file(a.id)).content, "old")
        with self.assertRaises(PersistenceError):
            update.raise_for_error()
        self.assertEqual([n.title for n in session.drain_notices()], ["Failed to save file"])

    async def test_write_for_unopened_file_still_persists(self) -> None:
        await self._add("/a.js")
        b = await self._add("/b.js", content="b")
        session = await self._session()
        update = await session.update_content(b.id, "bb")
        self.assertFalse(update.applied)
        self.assertTrue(update.persisted)
        self.assertEqual((await self.store.get_file(b.id)).content, "bb")

    async def test_missing_file_write_is_reported(self) -> None:
        session = await self._session()
        update = await session.update_content(404, "x")
        self.assertFalse(update.persisted)
        self.assertFalse(update.diverged)
        self.assertEqual(update.error, "File not found")

    async def test_directory_content_write_is_refused(self) -> None:
        folder = await self._add("/src", kind="directory")
        await self._add("/src/a.js")
        session = await self._session()

        update = await session.update_content(folder.id, "junk")
        self.assertFalse(update.persisted)
        self.assertFalse(update.diverged)
        self.assertEqual(update.error, "Directories have no content")
        self.assertNotIn("content", self.store._files[folder.id])

    async def test_other_projects_files_are_not_written(self) -> None:
        other = await self.store.create_project(ProjectCreate(name="other"))
        foreign = await file_service.create_entry(
            self.store,
            self.store,
            FileCreate(projectId=other.id, name="x.js", path="/x.js", kind="file", content="theirs"),
        )
        session = await self._session()

        update = await session.update_content(foreign.id, "overwritten")
        self.assertFalse(update.persisted)
        self.assertEqual(update.error, "File not found")

        results = []
        await session.schedule_content_update(foreign.id, "overwritten", results.append)
        await asyncio.sleep(0)
        self.assertFalse(results[0].persisted)
        self.assertEqual((await self.store.get_file(foreign.id)).content, "theirs")

    async def test_scheduled_write_result_is_dropped_after_teardown(self) -> None:
        a = await self._add("/a.js")
        session = await self._session()
        results = []
        task = session.schedule_content_update(a.id, "late", results.append)
        self.assertEqual(session.active_entry.content, "late")
        self.assertEqual(session.teardown(), 1)
        await task
        await asyncio.sleep(0)
        self.assertEqual(results, [])
        self.assertTrue(session.closed)
        self.assertEqual((await self.store.get_file(a.id)).content, "late")

    async def test_scheduled_write_reports_result(self) -> None:
        a = await self._add("/a.js")
        session = await self._session()
        results = []
        await session.schedule_content_update(a.id, "v2", results.append)
        await asyncio.sleep(0)
        self.assertEqual(len(results), 1)
        self.assertTrue(results[0].persisted)

    async def test_create_entry_adds_to_listing(self) -> None:
        session = await self._session()
        folder = await session.create_entry("src", "directory")
        created = await session.create_entry("app.ts", "file", "/src")
        self.assertEqual(created.path, "/src/app.ts")
        self.assertEqual(created.language, "typescript")
        self.assertIn("/src", session.expanded_paths)
        self.assertEqual([(r.entry.id, r.depth) for r in session.rows()], [(folder.id, 0), (created.id, 1)])
        self.assertEqual([n.title for n in session.drain_notices()], ["Folder created", "File created"])

    async def test_create_entry_rejects_blank_and_duplicates(self) -> None:
        await self._add("/a.js")
        session = await self._session()
        session.drain_notices()
        self.assertIsNone(await session.create_entry("  ", "file"))
        self.assertIsNone(await session.create_entry("a.js", "file"))
        notices = session.drain_notices()
        self.assertEqual([n.title for n in notices], ["Name required", "Failed to create file"])
        self.assertTrue(all(n.variant == "destructive" for n in notices))
        self.assertEqual(len(session.entries), 1)

    async def test_status_line(self) -> None:
        await self._add("/main.py")
        session = await self._session()
        session.set_cursor(CursorPosition(12, 4))
        status = session.status()
        self.assertEqual(status.language, "Python")
        self.assertEqual(status.position, "Ln 12, Col 4")
        self.assertEqual((status.encoding, status.line_ending), ("UTF-8", "LF"))

    def test_cursor_is_one_based(self) -> None:
        with self.assertRaises(ValueError):
            CursorPosition(0, 1)

    async def test_refresh_picks_up_new_entries(self) -> None:
        session = await self._session()
        self.assertIsNone(session.active_entry)
        added = await self._add("/late.js")
        await session.refresh()
        self.assertIsInstance(session.active_entry, FileEntry)
        self.assertEqual(session.active_entry.id, added.id)

    async def test_snapshot_shape(self) -> None:
        await self._add("/a.js")
        session = await self._session()
        snap = session.snapshot()
        self.assertEqual(snap["project_id"], self.project.id)
        self.assertEqual(snap["active"]["path"], "/a.js")
        self.assertEqual(snap["tree"][0]["active"], True)
        self.assertEqual(snap["expanded"], ["/"])


if __name__ == "__main__":
    unittest.main()

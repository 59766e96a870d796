import logging
import os

import pytest

from vaulttasks.exceptions import PathAccessError, VaultNotFoundError
from vaulttasks.models.tasks import Priority, TaskStatus
from vaulttasks.services.vault import (
    extract_tasks_from_file,
    find_all_tasks,
    find_markdown_files,
    resolve_path,
)


class TestResolvePath:
    def test_default_is_vault_root(self, vault):
        assert resolve_path(None, vault) == vault.resolve()
        assert resolve_path("", vault) == vault.resolve()
        assert resolve_path(".", vault) == vault.resolve()

    def test_subdirectory(self, vault):
        assert resolve_path("projects", vault) == (vault / "projects").resolve()

    def test_rejects_traversal(self, vault):
        with pytest.raises(PathAccessError, match="directory traversal"):
            resolve_path("../outside", vault)
        with pytest.raises(PathAccessError):
            resolve_path("projects/../..", vault)

    def test_rejects_absolute_path_outside_vault(self, vault, tmp_path_factory):
        other = tmp_path_factory.mktemp("other")
        with pytest.raises(PathAccessError, match="outside vault"):
            resolve_path(str(other), vault)

    def test_accepts_absolute_path_inside_vault(self, vault):
        assert resolve_path(str(vault / "projects"), vault) == (vault / "projects").resolve()

    def test_rejects_symlink_leaving_vault(self, vault, tmp_path_factory):
        other = tmp_path_factory.mktemp("other")
        os.symlink(other, vault / "escape")
        with pytest.raises(PathAccessError):
            resolve_path("escape", vault)

    def test_missing_path(self, vault):
        with pytest.raises(VaultNotFoundError):
            resolve_path("nope", vault)

    def test_missing_vault(self, tmp_path):
        with pytest.raises(VaultNotFoundError):
            resolve_path(None, tmp_path / "missing")


class TestFindMarkdownFiles:
    def test_recursive_and_sorted(self, vault):
        files = find_markdown_files(vault)
        assert [f.relative_to(vault).as_posix() for f in files] == ["projects/alpha.md", "sample-tasks.md"]

    def test_single_file(self, vault):
        assert find_markdown_files(vault / "sample-tasks.md") == [vault / "sample-tasks.md"]
        assert find_markdown_files(vault / "notes.txt") == []


class TestExtractTasksFromFile:
    def test_sample_file(self, vault):
        tasks = extract_tasks_from_file(vault / "sample-tasks.md")
        assert len(tasks) == 9
        assert len([t for t in tasks if t.status == TaskStatus.INCOMPLETE]) == 4
        assert len([t for t in tasks if t.status == TaskStatus.COMPLETE]) == 2
        assert all(t.file_path == str(vault / "sample-tasks.md") for t in tasks)

        report = tasks[0]
        assert report.line_number == 2
        assert report.due_date == "2025-05-01"
        assert report.scheduled_date == "2025-04-25"
        assert report.priority == Priority.HIGH
        assert report.tags == ["#work"]

    def test_unreadable_file_is_skipped(self, tmp_path, caplog):
        bad = tmp_path / "bad.md"
        bad.write_bytes(b"- [ ] \xff\xfe broken")
        with caplog.at_level(logging.WARNING, logger="vaulttasks.services.vault"):
            assert extract_tasks_from_file(bad) == []
        assert "bad.md" in caplog.text


class TestFindAllTasks:
    def test_collects_from_every_file(self, vault):
        tasks = find_all_tasks(vault)
        assert len(tasks) == 11
        assert len({t.file_path for t in tasks}) == 2
        assert len({t.id for t in tasks}) == 11

    def test_bad_file_does_not_abort_batch(self, vault):
        (vault / "broken.md").write_bytes(b"\xff\xfe\xfd")
        assert len(find_all_tasks(vault)) == 11

    def test_subdirectory(self, vault):
        tasks = find_all_tasks(vault / "projects")
        assert [t.priority for t in tasks] == [Priority.HIGH, Priority.LOWEST]

import pytest

from fastapi.testclient import TestClient

from vaulttasks.config import Settings


# --- Sample vault content ---

SAMPLE_TASKS_MD = """# Sample tasks

- [ ] Write report 📅 2025-05-01 ⏳ 2025-04-25 #work ⏫
- [x] Ship release #work #release
- [ ] Buy milk
- [/] Refactor parser #dev/parser 🔼
- [-] Cancelled meeting
* [ ] Plan trip 🛫 2025-06-01 ➕ 2025-04-01 🔁 weekly
1. [ ] Numbered task 🔽
> - [X] Quoted task in a callout
- [?] Open question
Not a task
- plain list item
"""

PROJECT_MD = """## Project

	- [ ] Nested high priority task #project ⏫
- [ ] Lowest priority chore ⏬
"""


@pytest.fixture
def vault(tmp_path):
    (tmp_path / "sample-tasks.md").write_text(SAMPLE_TASKS_MD, encoding="utf-8")
    (tmp_path / "projects").mkdir()
    (tmp_path / "projects" / "alpha.md").write_text(PROJECT_MD, encoding="utf-8")
    (tmp_path / "notes.txt").write_text("- [ ] not markdown\n", encoding="utf-8")
    return tmp_path


@pytest.fixture
def settings(vault, mocker):
    """Point the cached settings at the temporary vault."""
    s = Settings(vault_directory=vault)
    mocker.patch("vaulttasks.services.tasks.get_settings", return_value=s)
    mocker.patch("vaulttasks.mcp_server.get_settings", return_value=s)
    mocker.patch("vaulttasks.main.get_settings", return_value=s)
    return s


@pytest.fixture
def api_client():
    """FastAPI TestClient for router tests."""
    from vaulttasks.main import api
    return TestClient(api)

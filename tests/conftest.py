import os
import sys

import pytest


def pytest_configure():
    # Ensure the repo root is importable for `spiral_journal.*` imports
    root = os.path.abspath(os.path.dirname(os.path.dirname(__file__)))
    if root not in sys.path:
        sys.path.insert(0, root)


@pytest.fixture
def tmp_db(tmp_path, monkeypatch):
    from spiral_journal import config
    from spiral_journal.services.storage import init_db

    db_path = str(tmp_path / "data" / "journal.db")
    monkeypatch.setattr(config, "DB_PATH", db_path)
    init_db()
    return db_path

from __future__ import annotations

from pathlib import Path

import pytest

from services.storefront.tests.fakes import FakeStorefrontApi, line_item


@pytest.fixture()
def fake_api() -> FakeStorefrontApi:
    return FakeStorefrontApi()


@pytest.fixture()
def make_item():
    return line_item


@pytest.fixture()
def local_db(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    db_path = tmp_path / "storefront_test.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite+pysqlite:///{db_path}")
    monkeypatch.setenv("STOREFRONT_DB_AUTO_CREATE", "true")

    from services.storefront.app.db.init_db import init_db

    init_db()
    return db_path

import pytest
from clinic_records.config import get_settings
from clinic_records.store import RecordsStore
from scripts.init_db import init


@pytest.fixture
def database_url(tmp_path, monkeypatch):
    url = f"sqlite+aiosqlite:///{tmp_path / 'bootstrap.db'}"
    monkeypatch.setenv("DATABASE_URL", url)
    get_settings.cache_clear()
    yield url
    get_settings.cache_clear()


async def test_init_creates_tables(database_url):
    assert await init() is True

    async with RecordsStore.from_settings() as store:
        result = await store.create_doctor({
            "first_name": "Ann", "last_name": "Lee", "email": "ann@x.com", "password": "pw",
        })
        assert (await store.get_doctor(result.insert_id))["email"] == "ann@x.com"


async def test_check_only_reports_missing_schema(database_url):
    assert await init(check_only=True) is False

import pytest
from clinic_records.config import Settings
from clinic_records.database import create_tables
from clinic_records.store import RecordsStore


@pytest.fixture
def settings(tmp_path):
    return Settings(_env_file=None, database_url=f"sqlite+aiosqlite:///{tmp_path / 'records.db'}")


@pytest.fixture
async def store(settings):
    store = RecordsStore.from_settings(settings)
    await create_tables(store.engine)
    yield store
    await store.close()


@pytest.fixture
async def doctor(store):
    return await store.create_doctor({
        "first_name": "Ann",
        "last_name": "Lee",
        "email": "ann@x.com",
        "password": "pw",
    })

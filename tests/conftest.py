import pytest

from assistencia.infra.storage import MemoryStore
from assistencia.usecases.estado import criar_container


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def container(store):
    return criar_container(store=store)


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "assistencia_test.db")

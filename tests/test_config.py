from rentaltrust.config import Settings
from rentaltrust.services.storage import build_storage
from rentaltrust.services.store import StoreBackend


def test_cors_origins_include_production_domains():
    settings = Settings(cors_origins=["http://localhost:5174"])

    origins = settings.cors_allow_origins

    assert origins[0] == "http://localhost:5174"
    assert "https://app.rentaltrust.io" in origins
    assert "https://rentaltrust.io" in origins


def test_storage_backend_defaults_to_memory(monkeypatch):
    monkeypatch.delenv("STORAGE_BACKEND", raising=False)
    assert Settings().storage_backend == "memory"


def test_storage_backend_read_from_environment(monkeypatch):
    monkeypatch.setenv("STORAGE_BACKEND", "database")
    assert Settings().storage_backend == "database"


def test_build_storage_selects_backend(sql_storage):
    assert build_storage("memory").backend == StoreBackend.MEMORY

    session_factory = sql_storage.users.session_factory
    database = build_storage(StoreBackend.DATABASE, session_factory=session_factory)
    assert database.backend == StoreBackend.DATABASE

from app.audittrack.db import _engine_kwargs


def test_sqlite_engine_allows_cross_thread_use():
    kwargs = _engine_kwargs("sqlite:///audittrack.db")
    assert kwargs["connect_args"] == {"check_same_thread": False}
    assert "pool_size" not in kwargs


def test_postgres_engine_pool_settings():
    kwargs = _engine_kwargs("postgresql://u:p@db/audittrack")
    assert kwargs["pool_size"] == 5
    assert kwargs["pool_recycle"] == 1800
    assert "connect_args" not in kwargs

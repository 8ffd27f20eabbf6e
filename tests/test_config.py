"""Tests for environment-backed settings."""

import pytest

from core import config, db


def test_env_int_falls_back_on_garbage(monkeypatch) -> None:
    monkeypatch.setenv("MAX_UPLOAD_BYTES", "lots")
    assert config.max_upload_bytes() == config.DEFAULT_MAX_UPLOAD_BYTES


def test_non_positive_upload_limit_ignored(monkeypatch) -> None:
    monkeypatch.setenv("MAX_UPLOAD_BYTES", "0")
    assert config.max_upload_bytes() == config.DEFAULT_MAX_UPLOAD_BYTES


def test_cors_origins(monkeypatch) -> None:
    monkeypatch.setenv("CORS_ORIGINS", "http://localhost:5173, https://example.com ,")
    assert config.cors_origins() == ["http://localhost:5173", "https://example.com"]


def test_pool_max_never_below_min(monkeypatch) -> None:
    monkeypatch.setenv("DB_POOL_MIN_SIZE", "8")
    monkeypatch.setenv("DB_POOL_MAX_SIZE", "2")
    assert config.db_pool_max_size() == 8


def test_database_url_required(monkeypatch) -> None:
    monkeypatch.delenv("DATABASE_URL", raising=False)
    with pytest.raises(RuntimeError):
        config.database_url()


def test_sslmode_stripped(monkeypatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@host/db?sslmode=require&application_name=api")
    assert db.database_url() == "postgresql://u:p@host/db?application_name=api"


def test_affected_rows() -> None:
    assert db.affected_rows("DELETE 1") == 1
    assert db.affected_rows("UPDATE 0") == 0
    assert db.affected_rows("") == 0

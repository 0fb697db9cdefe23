from __future__ import annotations

from votehub.config import Settings


def test_principal_lists_from_env(monkeypatch):
    monkeypatch.setenv("ADMIN_PRINCIPALS", " 0xa, 0xb ,,")
    monkeypatch.setenv("FUNDER_PRINCIPALS", "0xf")
    s = Settings(_env_file=None)
    assert s.admin_principals == ["0xa", "0xb"]
    assert s.funder_principals == ["0xf"]


def test_defaults(monkeypatch):
    for name in ("ADMIN_PRINCIPALS", "FUNDER_PRINCIPALS", "LOG_LEVEL", "LEDGER_PRINCIPAL", "DATABASE_URL", "DB_PATH"):
        monkeypatch.delenv(name, raising=False)
    s = Settings(_env_file=None)
    assert s.admin_principals == []
    assert s.log_level == "INFO"
    assert s.ledger_principal == "votehub-ledger"
    assert s.cors_allow_origins == ["*"]


def test_log_level_normalized(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", " debug ")
    assert Settings(_env_file=None).log_level == "DEBUG"


def test_resolved_database_url(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.setenv("DB_PATH", "/var/lib/votehub/ledger.sqlite")
    assert Settings(_env_file=None).resolved_database_url == "sqlite:////var/lib/votehub/ledger.sqlite"

    monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@db/votehub")
    assert Settings(_env_file=None).resolved_database_url == "postgresql://u:p@db/votehub"

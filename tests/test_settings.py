from pathlib import Path

from notefields.core.settings import Settings


def test_default_database_url_lives_in_vault(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("POSTGRES_HOST", raising=False)
    monkeypatch.setenv("VAULT_DIR", str(tmp_path))

    settings = Settings(_env_file=None)

    assert settings.database_url == f"sqlite:///{tmp_path / 'notefields.db'}"


def test_postgres_components_build_url(monkeypatch) -> None:
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.setenv("POSTGRES_HOST", "db")
    monkeypatch.setenv("POSTGRES_USER", "u")
    monkeypatch.setenv("POSTGRES_PASSWORD", "p")
    monkeypatch.setenv("POSTGRES_DB", "vault")
    monkeypatch.delenv("POSTGRES_PORT", raising=False)

    settings = Settings(_env_file=None)

    assert settings.database_url == "postgresql+psycopg://u:p@db:5432/vault"


def test_explicit_database_url_wins(monkeypatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "sqlite:///elsewhere.db")
    monkeypatch.setenv("POSTGRES_HOST", "db")

    assert Settings(_env_file=None).database_url == "sqlite:///elsewhere.db"

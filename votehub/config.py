from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any, List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


def _split_csv(raw: Any, fallback: List[str]) -> List[str]:
    """
    Normalize list-like env values.

    Supports:
      - list[str] (already parsed)
      - comma-separated string: "0xabc, 0xdef"
      - empty / missing -> fallback
    """
    if raw is None:
        return list(fallback)

    if isinstance(raw, (list, tuple)):
        items = [str(x).strip() for x in raw]
        items = [x for x in items if x]
        return items or list(fallback)

    s = str(raw).strip()
    if not s:
        return list(fallback)

    parts = [p.strip() for p in s.split(",")]
    parts = [p for p in parts if p]
    return parts or list(fallback)


class Settings(BaseSettings):
    """
    Central ledger service settings.

    - Env var names are API-stable (see aliases).
    - Principal lists are comma-separated and seeded into the roles table at bootstrap.
    - The vote delay is NOT configurable; it lives in services.workflow.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
    )

    # App identity
    env: str = Field(default="local", alias="APP_ENV")
    app_name: str = Field(default="votehub", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Server runtime (uvicorn)
    host: str = Field(default="127.0.0.1", alias="HOST")
    port: int = Field(default=8000, alias="PORT")
    reload: bool = Field(default=False, alias="RELOAD")

    cors_allow_origins: Annotated[list[str], NoDecode] = Field(default_factory=lambda: ["*"], alias="CORS_ALLOW_ORIGINS")

    # Preferred: a real SQLAlchemy URL
    database_url: str = Field(default="", alias="DATABASE_URL")
    db_path: str = Field(default="./data/votehub.sqlite", alias="DB_PATH")

    # The identity the ledger itself uses when minting participation tokens
    ledger_principal: str = Field(default="votehub-ledger", alias="LEDGER_PRINCIPAL")

    # Seeded roles
    admin_principals: Annotated[list[str], NoDecode] = Field(default_factory=list, alias="ADMIN_PRINCIPALS")
    funder_principals: Annotated[list[str], NoDecode] = Field(default_factory=list, alias="FUNDER_PRINCIPALS")

    # -------------------------
    # Validators / normalizers
    # -------------------------

    @field_validator("log_level", mode="before")
    @classmethod
    def _norm_log_level(cls, v: Any) -> str:
        s = ("" if v is None else str(v)).strip().upper()
        return s or "INFO"

    @field_validator("cors_allow_origins", mode="before")
    @classmethod
    def _norm_cors_allow_origins(cls, v: Any) -> list[str]:
        return _split_csv(v, ["*"])

    @field_validator("admin_principals", "funder_principals", mode="before")
    @classmethod
    def _norm_principals(cls, v: Any) -> list[str]:
        return _split_csv(v, [])

    @field_validator("host", mode="before")
    @classmethod
    def _norm_host(cls, v: Any) -> str:
        s = ("" if v is None else str(v)).strip()
        return s or "127.0.0.1"

    @field_validator("ledger_principal", mode="before")
    @classmethod
    def _norm_ledger_principal(cls, v: Any) -> str:
        s = ("" if v is None else str(v)).strip()
        return s or "votehub-ledger"

    @field_validator("database_url", mode="before")
    @classmethod
    def _norm_database_url(cls, v: Any) -> str:
        return ("" if v is None else str(v)).strip()

    @field_validator("db_path", mode="before")
    @classmethod
    def _norm_db_path(cls, v: Any) -> str:
        s = ("" if v is None else str(v)).strip()
        return s or "./data/votehub.sqlite"

    # -------------------------
    # Derived helpers
    # -------------------------

    @property
    def is_prod(self) -> bool:
        return str(self.env).strip().lower() in ("prod", "production")

    @property
    def resolved_database_url(self) -> str:
        """
        Priority:
        1) DATABASE_URL if provided
        2) Build sqlite:/// URL from DB_PATH (file path or full sqlite URL)
        """
        if self.database_url:
            return self.database_url

        path = (self.db_path or "").strip() or "./data/votehub.sqlite"

        if path.startswith("sqlite:"):
            return path

        p = Path(path)
        if not p.is_absolute():
            if str(p).startswith("./"):
                return f"sqlite:///{p.as_posix()}"
            return f"sqlite:///./{p.as_posix()}"

        # Absolute path needs 4 slashes after scheme (sqlite:////abs/path)
        return f"sqlite:////{p.as_posix().lstrip('/')}"


settings = Settings()

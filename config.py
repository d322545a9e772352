"""Runtime settings read from the environment."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping

DEFAULT_OPENAI_MODEL = "gpt-4o-mini"


@dataclass(frozen=True)
class Settings:
    openai_api_key: str = ""
    openai_model: str = DEFAULT_OPENAI_MODEL
    database_url: str = ""
    database_name: str = ""
    cors_allow_origins: list[str] = field(default_factory=lambda: ["*"])
    port: int = 8000

    @property
    def generation_enabled(self) -> bool:
        return bool(self.openai_api_key)

    @property
    def database_configured(self) -> bool:
        return bool(self.database_url and self.database_name)


def parse_cors_allowlist(raw: str) -> list[str]:
    origins = [o.strip() for o in raw.split(",") if o and o.strip()]
    return origins or ["*"]


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    env = os.environ if environ is None else environ
    return Settings(
        openai_api_key=env.get("OPENAI_API_KEY", "").strip(),
        openai_model=env.get("OPENAI_MODEL", "").strip() or DEFAULT_OPENAI_MODEL,
        database_url=env.get("DATABASE_URL", "").strip(),
        database_name=env.get("DATABASE_NAME", "").strip(),
        cors_allow_origins=parse_cors_allowlist(env.get("CORS_ALLOW_ORIGINS", "")),
        port=int(env.get("PORT", "") or 8000),
    )

"""Game server configuration via environment variables."""

from typing import Annotated

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode

from connect4.session.identity import IdFormat
from shared.validators import parse_string_list


class GameServerSettings(BaseSettings):
    model_config = {"env_prefix": "GAME_", "populate_by_name": True}

    host: str = Field(default="0.0.0.0", min_length=1)  # noqa: S104
    # PORT is honoured for platforms that inject it directly.
    port: int = Field(default=3000, ge=1, le=65535, validation_alias=AliasChoices("GAME_PORT", "PORT"))
    max_capacity: int = Field(default=1000, ge=1)
    id_format: IdFormat = IdFormat.UUID
    # Raise on registry bookkeeping errors instead of logging and dropping the send.
    strict_invariants: bool = False
    cors_origins: Annotated[list[str], NoDecode] = ["http://localhost:3000"]
    log_dir: str | None = Field(default=None, min_length=1)

    @field_validator("cors_origins", mode="before")
    @classmethod
    def validate_cors_origins(cls, v: str | list[str]) -> list[str]:
        return parse_string_list(v)

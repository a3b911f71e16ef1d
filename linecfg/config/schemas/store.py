"""Store file settings: path, line bound, scan mode, schema source."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class StoreConfig(BaseModel):
    path: str = Field("config.txt", min_length=1)
    max_line: int = Field(
        512, ge=2, description="bytes per line including terminator"
    )
    scan_mode: str = Field("first", pattern="^(first|all)$")
    schema_file: str | None = Field(
        None, description="YAML schema for the process-wide registry"
    )

    model_config = ConfigDict(extra="forbid")

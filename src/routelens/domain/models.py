from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

HttpMethod = Literal["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS", "HEAD", "ALL"]
Framework = Literal["express", "nestjs", "unknown"]


class _Record(BaseModel):
    # camelCase on the wire, snake_case in Python; immutable once built
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)


class RouteParam(_Record):
    name: str
    kind: Literal["path"] = "path"
    required: bool = True


class SourceLocation(_Record):
    file_path: str
    line: int  # 1-based
    column: int  # 0-based


class RouteDescriptor(_Record):
    method: HttpMethod
    path: str
    handler: str
    source_location: SourceLocation
    framework: Framework
    middleware: Optional[tuple[str, ...]] = None
    params: tuple[RouteParam, ...] = Field(default_factory=tuple)
    controller: Optional[str] = None

    @field_validator("path")
    @classmethod
    def _path_is_normalized(cls, v: str) -> str:
        if not v.startswith("/") or "//" in v or (v != "/" and v.endswith("/")):
            raise ValueError(f"route path is not normalized: {v!r}")
        return v

    def to_record(self) -> dict[str, Any]:
        """
        Plain structured record used by exporters and the JSON output.
        Absent optional fields are omitted rather than emitted as null.
        """
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ParseError(_Record):
    message: str
    line: int = 0
    column: int = 0


class ParseOutcome(_Record):
    routes: tuple[RouteDescriptor, ...] = Field(default_factory=tuple)
    framework: Framework = "unknown"
    errors: tuple[ParseError, ...] = Field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return not self.errors

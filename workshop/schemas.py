from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field

TBaseSchema = TypeVar("TBaseSchema", bound="BaseSchema")


class BaseSchema(BaseModel):
    # BLOB columns come back as bytes; hex keeps any value JSON-safe
    model_config = ConfigDict(populate_by_name=True, ser_json_bytes="hex")

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)

    def to_dict(self) -> dict[str, object]:
        return self.model_dump(by_alias=True)

    @classmethod
    def from_json(cls: type[TBaseSchema], data: str) -> TBaseSchema:
        return cls.model_validate_json(data)

    @classmethod
    def from_dict(cls: type[TBaseSchema], data: Mapping[str, object]) -> TBaseSchema:
        return cls.model_validate(data)


class QueryRequest(BaseSchema):
    query: str
    course: str


class QuerySuccess(BaseSchema):
    success: bool = True
    results: list[dict[str, Any]]
    execution_time: int = Field(alias="executionTime", ge=0)
    row_count: int = Field(alias="rowCount", ge=0)


class QueryFailure(BaseSchema):
    success: bool = False
    error: str
    results: None = None


class ColumnSchema(BaseSchema):
    name: str
    type: str
    is_primary_key: bool = Field(alias="isPrimaryKey")
    is_not_null: bool = Field(alias="isNotNull")

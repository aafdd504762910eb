"""
Course-facing entry points for the SQL sandbox.

The course gate lives here, in front of the sandbox: a request for any course
other than the configured SQL course is refused before admission runs.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import TypeAlias

from tqdm import tqdm

from sandbox.executor import ExecutionResult, SandboxExecutor
from sandbox.introspect import describe_schema
from workshop.config import WorkshopConfig
from workshop.schemas import ColumnSchema, QueryFailure, QueryRequest, QuerySuccess

logger = logging.getLogger(__name__)

QueryResponse: TypeAlias = QuerySuccess | QueryFailure
RequestInput: TypeAlias = QueryRequest | Mapping[str, object]


class CourseNotPermitted(Exception):
    """The request's course does not have access to the SQL workshop."""

    def __init__(self, course: str) -> None:
        super().__init__(f"SQL execution is not available for course '{course}'")
        self.course = course


def to_response(result: ExecutionResult) -> QueryResponse:
    if result.success:
        return QuerySuccess(
            results=result.rows or [],
            execution_time=result.elapsed_ms,
            row_count=result.row_count,
        )
    return QueryFailure(error=result.error or "Query failed")


class WorkshopService:
    def __init__(
        self,
        config: WorkshopConfig | None = None,
        executor: SandboxExecutor | None = None,
    ) -> None:
        self.config = config or WorkshopConfig()
        self.executor = executor or SandboxExecutor(timeout_ms=self.config.timeout_ms)

    def check_course(self, course: str) -> None:
        if course != self.config.course:
            logger.info("Refused SQL execution for course %r", course)
            raise CourseNotPermitted(course)

    def execute(self, request: RequestInput) -> QueryResponse:
        parsed = self._parse(request)
        self.check_course(parsed.course)
        return to_response(self.executor.run(parsed.query))

    async def execute_async(self, request: RequestInput) -> QueryResponse:
        parsed = self._parse(request)
        self.check_course(parsed.course)
        result = await self.executor.run_async(parsed.query)
        return to_response(result)

    def run_many(self, queries: Sequence[str], show_progress: bool = False) -> list[ExecutionResult]:
        """Run queries concurrently; each one still gets its own fixture."""
        with ThreadPoolExecutor(max_workers=self.config.max_workers) as pool:
            pbar = tqdm(
                pool.map(self.executor.run, queries),
                total=len(queries),
                desc="Running",
                unit="query",
                disable=not show_progress,
            )
            return list(pbar)

    def schema(self) -> dict[str, list[dict[str, object]]]:
        return {
            table: [
                ColumnSchema(
                    name=column.name,
                    type=column.type,
                    is_primary_key=column.is_primary_key,
                    is_not_null=column.is_not_null,
                ).to_dict()
                for column in columns
            ]
            for table, columns in describe_schema().items()
        }

    def _parse(self, request: RequestInput) -> QueryRequest:
        if isinstance(request, QueryRequest):
            return request
        return QueryRequest.from_dict(request)

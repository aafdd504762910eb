"""
Per-request sandbox executor for admitted workshop queries.
"""

from __future__ import annotations

import asyncio
import logging
import sqlite3
import time
from collections.abc import Callable
from dataclasses import dataclass

from fixture import dataset
from sandbox import policy
from sandbox.failures import (
    AdmissionRejected,
    EngineError,
    FailureType,
    FixtureUnavailable,
    TimeoutExceeded,
)

logger = logging.getLogger(__name__)

Row = dict[str, object]

SECURITY_MESSAGE = "Security protocol activated: {reason}. Only SELECT queries are allowed in the workshop."
ENGINE_MESSAGE = "SQL error detected - {detail}"
TIMEOUT_MESSAGE = "Query timeout: {detail}. The workshop requires efficient queries."
UNAVAILABLE_MESSAGE = "Workshop database is unavailable. Please try again later."


@dataclass
class ExecutionResult:
    success: bool
    rows: list[Row] | None
    row_count: int
    elapsed_ms: int
    error: str | None = None
    failure: FailureType | None = None

    @classmethod
    def failed(cls, failure: FailureType, error: str, elapsed_ms: int = 0) -> "ExecutionResult":
        return cls(
            success=False,
            rows=None,
            row_count=0,
            elapsed_ms=elapsed_ms,
            error=error,
            failure=failure,
        )


class SandboxExecutor:
    """
    Run one query against a freshly built fixture per call.

    The timeout is a budget checked after the query completes: a slow query
    still runs to the end and is then reported as failed. Nothing interrupts
    the engine mid-flight.
    """

    DEFAULT_TIMEOUT_MS: int = 500

    def __init__(
        self,
        timeout_ms: int | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self.timeout_ms: int = self.DEFAULT_TIMEOUT_MS if timeout_ms is None else timeout_ms
        self.clock: Callable[[], float] = clock or time.perf_counter

    def run(self, raw_query: str) -> ExecutionResult:
        """Admit, then execute. Rejected queries never reach a database."""
        try:
            admitted = policy.require_admission(raw_query)
        except AdmissionRejected as exc:
            logger.info("Rejected query: %s", exc)
            return ExecutionResult.failed(
                FailureType.ADMISSION_REJECTED,
                SECURITY_MESSAGE.format(reason=exc),
            )
        return self.execute(admitted)

    def execute(self, admitted_query: str) -> ExecutionResult:
        try:
            fixture = dataset.build()
        except FixtureUnavailable:
            logger.exception("Failed to provision workshop fixture")
            return ExecutionResult.failed(FailureType.FIXTURE_UNAVAILABLE, UNAVAILABLE_MESSAGE)

        try:
            start = self.clock()
            try:
                rows = self._fetch_rows(fixture.connection, admitted_query)
            except EngineError as exc:
                elapsed_ms = self._elapsed_ms(start)
                logger.info("Engine error after %d ms: %s", elapsed_ms, exc)
                return ExecutionResult.failed(
                    FailureType.ENGINE_ERROR,
                    ENGINE_MESSAGE.format(detail=exc),
                    elapsed_ms,
                )
            elapsed_ms = self._elapsed_ms(start)
        finally:
            fixture.close()

        if elapsed_ms > self.timeout_ms:
            timeout = TimeoutExceeded(elapsed_ms, self.timeout_ms)
            logger.warning("Query exceeded time budget: %s", timeout)
            return ExecutionResult.failed(
                FailureType.TIMEOUT_EXCEEDED,
                TIMEOUT_MESSAGE.format(detail=timeout),
                elapsed_ms,
            )

        return ExecutionResult(
            success=True,
            rows=rows,
            row_count=len(rows),
            elapsed_ms=elapsed_ms,
        )

    async def run_async(self, raw_query: str) -> ExecutionResult:
        return await asyncio.to_thread(self.run, raw_query)

    async def execute_async(self, admitted_query: str) -> ExecutionResult:
        """Execute on a worker thread; the fixture lives entirely in that thread."""
        return await asyncio.to_thread(self.execute, admitted_query)

    def _fetch_rows(self, connection: sqlite3.Connection, query: str) -> list[Row]:
        try:
            cursor = connection.execute(first_statement(query))
        except sqlite3.Error as exc:
            raise EngineError(str(exc)) from exc
        try:
            records = cursor.fetchall()
            columns = [column[0] for column in cursor.description or ()]
        except sqlite3.Error as exc:
            raise EngineError(str(exc)) from exc
        finally:
            cursor.close()
        return [dict(zip(columns, tuple(record))) for record in records]

    def _elapsed_ms(self, start: float) -> int:
        return int((self.clock() - start) * 1000)


def first_statement(query: str) -> str:
    """Return the text up to the end of the first complete statement.

    Anything after it is ignored, the way sqlite3_prepare ignores its tail.
    Input with no complete statement is returned unchanged so the engine can
    report the error.
    """
    end = query.find(";")
    while end != -1:
        candidate = query[: end + 1]
        if sqlite3.complete_statement(candidate):
            return candidate
        end = query.find(";", end + 1)
    return query

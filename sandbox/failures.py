"""Failure classification for sandboxed query execution."""

from enum import Enum


class FailureType(str, Enum):
    ADMISSION_REJECTED = "admission_rejected"
    ENGINE_ERROR = "engine_error"
    TIMEOUT_EXCEEDED = "timeout_exceeded"
    FIXTURE_UNAVAILABLE = "fixture_unavailable"

    @property
    def user_correctable(self) -> bool:
        return self is not FailureType.FIXTURE_UNAVAILABLE


class SandboxError(Exception):
    """Base class for every failure the sandbox can report."""

    failure_type: FailureType


class AdmissionRejected(SandboxError):
    failure_type = FailureType.ADMISSION_REJECTED


class EngineError(SandboxError):
    failure_type = FailureType.ENGINE_ERROR


class TimeoutExceeded(SandboxError):
    failure_type = FailureType.TIMEOUT_EXCEEDED

    def __init__(self, elapsed_ms: int, limit_ms: int) -> None:
        super().__init__(f"Query took {elapsed_ms} ms (limit {limit_ms} ms)")
        self.elapsed_ms = elapsed_ms
        self.limit_ms = limit_ms


class FixtureUnavailable(SandboxError):
    """Infrastructure fault while provisioning the dataset; not user-correctable."""

    failure_type = FailureType.FIXTURE_UNAVAILABLE

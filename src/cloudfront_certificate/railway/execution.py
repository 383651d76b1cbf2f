"""
Execution contexts — separate WHAT a pipeline computes from HOW it is run.

The pipeline itself is plain Result-returning code. The context around it
decides what happens at the boundary: here, structured logging of start,
duration and outcome, and conversion of stray exceptions into a Failure so
nothing unexpected escapes past the hook.
"""

from __future__ import annotations

import time
from typing import Callable, Protocol, TypeVar, runtime_checkable

import structlog

from cloudfront_certificate.railway.failure import ErrorCode, FailureDescription
from cloudfront_certificate.railway.result import Failure, Result

T = TypeVar("T")
log = structlog.get_logger()


@runtime_checkable
class ExecutionContext(Protocol):
    """Anything that can run a Result-returning computation."""

    def execute(self, computation: Callable[[], Result[T]]) -> Result[T]: ...


class NoOpExecutionContext:
    """Run the computation as-is. Used in tests and as the innermost context."""

    def execute(self, computation: Callable[[], Result[T]]) -> Result[T]:
        return computation()


class LoggingExecutionContext:
    """
    Log entry, exit, duration and result state around a computation.

        ctx = LoggingExecutionContext(operation="CloudFrontCertificate")
        result = ctx.execute(orchestrator.run)
    """

    def __init__(
        self,
        inner: ExecutionContext | None = None,
        operation: str = "unknown",
    ) -> None:
        self._inner = inner or NoOpExecutionContext()
        self._operation = operation

    def execute(self, computation: Callable[[], Result[T]]) -> Result[T]:
        log.info("execution.started", operation=self._operation)
        start = time.monotonic()

        try:
            result = self._inner.execute(computation)
        except Exception as e:
            elapsed = time.monotonic() - start
            log.error(
                "execution.crashed",
                operation=self._operation,
                elapsed_seconds=round(elapsed, 3),
                error=str(e),
            )
            return Failure(
                FailureDescription(ErrorCode.TECHNICAL_ERROR, f"Execution failed: {e}", e)
            )

        elapsed = time.monotonic() - start
        if result.is_success():
            log.info(
                "execution.completed",
                operation=self._operation,
                elapsed_seconds=round(elapsed, 3),
                state="SUCCESS",
            )
        else:
            log.error(
                "execution.completed",
                operation=self._operation,
                elapsed_seconds=round(elapsed, 3),
                state="FAILURE",
                failure=str(result.error()),
            )
        return result

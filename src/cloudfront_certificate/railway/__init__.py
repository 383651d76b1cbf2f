"""
Railway-style error handling for the certificate pipeline.

    from cloudfront_certificate.railway import ErrorCode, Result

    def require_resource(name: str | None) -> Result[str]:
        return Result.from_optional(name, "No distribution resource", ErrorCode.CONFIGURATION_ERROR)
"""

from cloudfront_certificate.railway.assertions import ResultAssertions
from cloudfront_certificate.railway.execution import (
    ExecutionContext,
    LoggingExecutionContext,
    NoOpExecutionContext,
)
from cloudfront_certificate.railway.failure import ErrorCode, FailureDescription
from cloudfront_certificate.railway.result import Failure, Result, Success

__all__ = [
    "Result",
    "Success",
    "Failure",
    "ErrorCode",
    "FailureDescription",
    "ExecutionContext",
    "NoOpExecutionContext",
    "LoggingExecutionContext",
    "ResultAssertions",
]

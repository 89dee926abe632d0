"""Central exception hierarchy for the award graph pipeline.

All custom exceptions inherit from AwardGraphError.

Exception Hierarchy:
    AwardGraphError (base)
    ├── ExtractionError
    ├── TransformationError
    │   └── TitleNormalizationError
    ├── LoadError
    │   └── Neo4jError
    ├── ConfigurationError
    └── FileSystemError

Usage:
    from award_graph.exceptions import Neo4jError, wrap_exception

    try:
        session.run(query)
    except neo4j.exceptions.ServiceUnavailable as exc:
        raise wrap_exception(exc, Neo4jError, operation="find_nodes") from exc
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Error codes for programmatic handling.

    Categories:
        1xxx - Configuration errors
        3xxx - Graph store errors
        4xxx - File I/O errors
        5xxx - Pipeline stage errors
    """

    # Configuration errors (1xxx)
    CONFIG_LOAD_FAILED = 1001
    CONFIG_VALIDATION_FAILED = 1002

    # Graph store (3xxx)
    NEO4J_CONNECTION_FAILED = 3001
    NEO4J_QUERY_FAILED = 3002

    # File I/O errors (4xxx)
    FILE_NOT_FOUND = 4001
    FILE_READ_FAILED = 4002

    # Pipeline stage errors (5xxx)
    EXTRACTION_FAILED = 5001
    TRANSFORMATION_FAILED = 5003
    LOADING_FAILED = 5004


class AwardGraphError(Exception):
    """Base exception for all award graph pipeline errors.

    Attributes:
        message: Human-readable error description
        component: Pipeline component (e.g., "loader.neo4j")
        operation: Operation being performed (e.g., "upsert_node")
        details: Additional context as dictionary
        retryable: Whether operation can be retried
        status_code: Numeric error code from ErrorCode enum
        cause: Original exception if wrapping another error
    """

    def __init__(
        self,
        message: str,
        component: str | None = None,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
        retryable: bool = False,
        status_code: ErrorCode | None = None,
        cause: Exception | None = None,
    ):
        self.message = message
        self.component = component or self.__class__.__module__
        self.operation = operation
        self.details = details or {}
        self.retryable = retryable
        self.status_code = status_code
        self.cause = cause

        parts = [message]
        if component:
            parts.append(f"[component={component}]")
        if operation:
            parts.append(f"[operation={operation}]")
        if status_code:
            parts.append(f"[code={status_code}]")

        super().__init__(" ".join(parts))

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "component": self.component,
            "operation": self.operation,
            "details": self.details,
            "retryable": self.retryable,
            "status_code": self.status_code.value if self.status_code else None,
            "cause": str(self.cause) if self.cause else None,
        }


# ============================================================================
# PIPELINE STAGE EXCEPTIONS
# ============================================================================


class ExtractionError(AwardGraphError):
    """Failed to extract award records from the source table.

    Example:
        raise ExtractionError(
            "Award export is missing required columns",
            component="extractor.awards",
            details={"missing_columns": ["AwardNumber"]},
        )
    """

    def __init__(self, message: str, **kwargs: Any):
        super().__init__(
            message,
            status_code=kwargs.pop("status_code", ErrorCode.EXTRACTION_FAILED),
            **kwargs,
        )


class TransformationError(AwardGraphError):
    """Data transformation failed."""

    def __init__(self, message: str, **kwargs: Any):
        super().__init__(
            message,
            status_code=kwargs.pop("status_code", ErrorCode.TRANSFORMATION_FAILED),
            **kwargs,
        )


class LoadError(AwardGraphError):
    """Loading into the graph store failed."""

    def __init__(self, message: str, **kwargs: Any):
        super().__init__(
            message,
            status_code=kwargs.pop("status_code", ErrorCode.LOADING_FAILED),
            **kwargs,
        )


# ============================================================================
# COMPONENT-SPECIFIC EXCEPTIONS
# ============================================================================


class Neo4jError(LoadError):
    """Neo4j round trip failed.

    Store errors are fatal for a batch run: the loader does not retry and
    does not clean up partial state. A full graph reset is the recovery path.

    Example:
        raise Neo4jError(
            "Failed to create Award node",
            query="CREATE (n:Award) SET n = $properties",
            operation="create_node",
        )
    """

    def __init__(self, message: str, query: str | None = None, **kwargs: Any):
        details = kwargs.pop("details", {})
        if query:
            details["query"] = query

        component = kwargs.pop("component", "neo4j")

        super().__init__(
            message,
            component=component,
            details=details,
            status_code=kwargs.pop("status_code", ErrorCode.NEO4J_QUERY_FAILED),
            **kwargs,
        )


class ConfigurationError(AwardGraphError):
    """Configuration loading or validation failed."""

    def __init__(self, message: str, config_key: str | None = None, **kwargs: Any):
        details = kwargs.pop("details", {})
        if config_key:
            details["config_key"] = config_key

        component = kwargs.pop("component", "config")

        super().__init__(
            message,
            component=component,
            details=details,
            status_code=kwargs.pop("status_code", ErrorCode.CONFIG_VALIDATION_FAILED),
            retryable=False,
            **kwargs,
        )


class FileSystemError(AwardGraphError):
    """File I/O operation failed."""

    def __init__(self, message: str, file_path: str | None = None, **kwargs: Any):
        details = kwargs.pop("details", {})
        if file_path:
            details["file_path"] = file_path

        component = kwargs.pop("component", "filesystem")

        super().__init__(
            message,
            component=component,
            details=details,
            status_code=kwargs.pop("status_code", ErrorCode.FILE_READ_FAILED),
            **kwargs,
        )


class TitleNormalizationError(TransformationError):
    """Title clustering failed."""

    def __init__(self, message: str, **kwargs: Any):
        component = kwargs.pop("component", "title_normalizer")
        super().__init__(message, component=component, **kwargs)


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================


def wrap_exception(
    original: Exception,
    error_class: type[AwardGraphError],
    message: str | None = None,
    **kwargs: Any,
) -> AwardGraphError:
    """Wrap a generic exception in a structured pipeline exception.

    Args:
        original: Original exception to wrap
        error_class: Exception class to use
        message: Override message (defaults to original message)
        **kwargs: Additional arguments for exception constructor

    Returns:
        Instance of error_class with original exception as cause
    """
    return error_class(message or str(original), cause=original, **kwargs)

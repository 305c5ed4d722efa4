"""Error types for the static site build step."""

from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field


class BuildErrorClass(str, Enum):
    """Classification of build errors.

    - LOADER: The renderer could not be located or is not callable
    - RENDER: A renderer invocation raised for a specific path
    - WRITE: The artifact store refused a write
    - CRAWL: Links could not be extracted from a written page
    """

    LOADER = "LOADER"
    RENDER = "RENDER"
    WRITE = "WRITE"
    CRAWL = "CRAWL"


class BuildError(Exception):
    """Base exception for build errors.

    Provides structured error information for logging and build reports.
    """

    def __init__(
        self,
        error_class: BuildErrorClass,
        message: str,
        path: str | None = None,
        details: dict[str, str | int | bool | None] | None = None,
    ) -> None:
        """Initialize the build error.

        Args:
            error_class: Classification of the error.
            message: Human-readable error message.
            path: Output path the error is attributed to, if any.
            details: Additional structured error details.
        """
        super().__init__(message)
        self.error_class = error_class
        self.message = message
        self.path = path
        self.details = details or {}

    def to_dict(
        self,
    ) -> dict[str, str | int | bool | None | dict[str, str | int | bool | None]]:
        """Convert error to dictionary for logging/serialization.

        Returns:
            Dictionary representation of the error.
        """
        return {
            "error_class": self.error_class.value,
            "message": self.message,
            "path": self.path,
            "details": self.details,
        }


class InvalidRendererError(BuildError):
    """The renderer export is missing or is not callable."""

    def __init__(self, renderer: str, reason: str) -> None:
        """Initialize the error.

        Args:
            renderer: Renderer reference as configured.
            reason: Why the export was rejected.
        """
        super().__init__(
            error_class=BuildErrorClass.LOADER,
            message=f'Export from "{renderer}" must be a function that returns '
            f"an HTML string: {reason}",
            details={"renderer": renderer},
        )
        self.renderer = renderer
        self.reason = reason


class MissingSourceError(BuildError):
    """The renderer module or file could not be located."""

    def __init__(self, renderer: str) -> None:
        """Initialize the error.

        Args:
            renderer: Renderer reference as configured.
        """
        super().__init__(
            error_class=BuildErrorClass.LOADER,
            message=f'Source file not found: "{renderer}"',
            details={"renderer": renderer},
        )
        self.renderer = renderer


class RenderError(BuildError):
    """A renderer invocation failed for a specific path.

    The original exception is chained as __cause__.
    """

    def __init__(self, path: str, cause: BaseException) -> None:
        """Initialize the render error.

        Args:
            path: Output path whose render failed.
            cause: Exception raised by the renderer.
        """
        super().__init__(
            error_class=BuildErrorClass.RENDER,
            message=f'Rendering "{path}" failed: {type(cause).__name__}: {cause}',
            path=path,
            details={"exception_type": type(cause).__name__},
        )
        self.__cause__ = cause


class ArtifactWriteError(BuildError):
    """The artifact store refused to store a rendered page."""

    def __init__(self, path: str, artifact_name: str, cause: BaseException) -> None:
        """Initialize the write error.

        Args:
            path: Output path that produced the artifact.
            artifact_name: Name the artifact was to be stored under.
            cause: Exception raised by the store.
        """
        super().__init__(
            error_class=BuildErrorClass.WRITE,
            message=f'Writing "{artifact_name}" failed: {type(cause).__name__}: {cause}',
            path=path,
            details={
                "artifact_name": artifact_name,
                "exception_type": type(cause).__name__,
            },
        )
        self.artifact_name = artifact_name
        self.__cause__ = cause


class LinkExtractionError(BuildError):
    """Links could not be extracted from a page that was written.

    The artifact stays in the store; only its outgoing links are lost.
    """

    def __init__(self, path: str, cause: BaseException) -> None:
        """Initialize the link extraction error.

        Args:
            path: Output path whose HTML was being scanned.
            cause: Exception raised during extraction.
        """
        super().__init__(
            error_class=BuildErrorClass.CRAWL,
            message=f'Extracting links from "{path}" failed: '
            f"{type(cause).__name__}: {cause}",
            path=path,
            details={"exception_type": type(cause).__name__},
        )
        self.__cause__ = cause


class BuildErrorRecord(BaseModel):
    """Serializable error record for build reports."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    error_class: BuildErrorClass = Field(description="Error classification")
    message: Annotated[str, Field(min_length=1, description="Error message")]
    path: str | None = Field(default=None, description="Output path")
    details: dict[str, str | int | bool | None] = Field(
        default_factory=dict, description="Additional error details"
    )

    @classmethod
    def from_exception(cls, error: BuildError) -> "BuildErrorRecord":
        """Create a BuildErrorRecord from a BuildError exception.

        Args:
            error: The exception to convert.

        Returns:
            BuildErrorRecord instance.
        """
        return cls(
            error_class=error.error_class,
            message=error.message,
            path=error.path,
            details=error.details,
        )

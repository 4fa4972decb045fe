"""
Pipeline Errors

StageFailure is the only error the orchestrator raises: it names the stage
that failed, keeps the underlying cause, and carries every status event
emitted before the failure. AdapterError and its subclasses are raised by
stage adapter implementations to signal domain-level rejections.
"""

from typing import Any, Iterable, Optional

from .state import PipelineStage, StatusEvent


class PipelineError(Exception):
    """Base class for production pipeline errors."""


class StageFailure(PipelineError):
    """Raised when a stage adapter fails. Terminal for the run."""

    def __init__(
        self,
        stage: PipelineStage,
        cause: BaseException,
        status_updates: Iterable[StatusEvent] = (),
    ):
        self.stage = stage
        self.cause = cause
        self.status_updates = tuple(status_updates)
        super().__init__(f"{stage.label} stage failed: {describe_cause(cause)}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": str(self),
            "failedStage": self.stage.value,
            "cause": type(self.cause).__name__,
            "statusUpdates": [event.to_dict() for event in self.status_updates],
        }


class AdapterError(PipelineError):
    """Raised by a stage adapter when its backend rejects the request."""

    def __init__(self, message: str, retryable: bool = False):
        self.retryable = retryable
        super().__init__(message)


class ScriptGenerationError(AdapterError):
    """The scriptwriter could not produce a script satisfying the brief."""


class PromptDesignError(AdapterError):
    """Per-scene prompts could not be derived from the script."""


class RenderError(AdapterError):
    """The render request was rejected or timed out."""


class PublishRejectedError(AdapterError):
    """The platform refused the upload (auth, quota, policy)."""

    def __init__(self, message: str, reason: str = "upload", retryable: bool = False):
        self.reason = reason
        super().__init__(message, retryable=retryable)


def describe_cause(cause: Optional[BaseException]) -> str:
    """Render an exception for user-facing messages."""
    if cause is None:
        return "unknown error"
    text = str(cause).strip()
    return text or type(cause).__name__

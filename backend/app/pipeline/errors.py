"""
Error taxonomy for the render-and-publish pipeline.

Every failure the pipeline knows about is a PipelineError.  The engine
stamps ``execution_id`` and ``step_name`` on the way out, and the HTTP
layer turns any of them into the same generic 500.  None are retried.
"""

from __future__ import annotations

from typing import Any


class PipelineError(Exception):
    """Base exception for all pipeline errors."""

    def __init__(
        self,
        message: str,
        *,
        execution_id: str | None = None,
        step_name: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.execution_id = execution_id
        self.step_name = step_name
        self.details = dict(details or {})

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self)!r}, step_name={self.step_name!r})"


class _WithDetails(PipelineError):
    """Lifts named keyword context into both attributes and ``details``."""

    context_keys: tuple[str, ...] = ()

    def __init__(self, message: str, **kwargs: Any) -> None:
        context = {key: kwargs.pop(key, None) for key in self.context_keys}
        super().__init__(message, **kwargs)
        for key, value in context.items():
            setattr(self, key, value)
            if value is not None:
                self.details.setdefault(key, value)


class StepExecutionError(PipelineError):
    """A step raised something outside this taxonomy."""


class TemplateError(PipelineError):
    """The markup template could not be located or read."""


class BookingFieldError(_WithDetails):
    """A booking field was absent or not a string."""

    context_keys = ("field_name",)


class RenderError(PipelineError):
    """The markup never reached a loaded state, or the browser failed to start."""


class ExportError(PipelineError):
    """PDF generation failed after the page loaded."""


class UploadError(_WithDetails):
    """The object store refused or could not be reached for a write or signature."""

    context_keys = ("bucket", "key")


class PolicyError(_WithDetails):
    """Bucket provisioning (existence check, creation, policy) failed."""

    context_keys = ("bucket",)

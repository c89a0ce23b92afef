"""Exceptions raised by the RAG pipelines.

``PipelineError`` and its subclasses are the only errors a caller of
``answer_query`` / ``store_query`` needs to handle. The remaining classes
signal programming mistakes (wrong step order, reading a field nobody
wrote) and are not meant to be caught.
"""

from typing import Optional


class PipelineError(Exception):
    """Base class for every error surfaced to a pipeline caller."""

    def __init__(
        self,
        message: str,
        collaborator: Optional[str] = None,
        step: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.collaborator = collaborator
        self.step = step

    def to_dict(self) -> dict:
        return {
            "error": "pipeline_error",
            "message": self.message,
            "collaborator": self.collaborator,
            "step": self.step,
        }


class CollaboratorError(PipelineError):
    """A downstream service answered with a non-success status.

    The status code and body are carried exactly as received. ``raw_body``
    keeps the undecoded bytes when the transport provided them.
    """

    def __init__(
        self,
        status_code: int,
        body: str,
        collaborator: Optional[str] = None,
        step: Optional[str] = None,
        raw_body: Optional[bytes] = None,
    ):
        super().__init__(
            f"{collaborator or 'collaborator'} returned HTTP {status_code}",
            collaborator=collaborator,
            step=step,
        )
        self.status_code = status_code
        self.body = body
        self.raw_body = raw_body

    def to_dict(self) -> dict:
        return {
            "error": "collaborator_error",
            "status_code": self.status_code,
            "body": self.body,
            "collaborator": self.collaborator,
            "step": self.step,
        }


class TransportError(PipelineError):
    """A collaborator was unreachable, timed out, or sent an unparseable body."""

    def __init__(
        self,
        message: str,
        error_type: str = "TransportError",
        collaborator: Optional[str] = None,
        step: Optional[str] = None,
    ):
        super().__init__(message, collaborator=collaborator, step=step)
        self.error_type = error_type

    def to_dict(self) -> dict:
        return {
            "error": "transport_error",
            "error_type": self.error_type,
            "message": self.message,
            "collaborator": self.collaborator,
            "step": self.step,
        }


class ValidationError(PipelineError):
    """The query text was rejected before any step ran."""

    def to_dict(self) -> dict:
        return {"error": "validation_error", "message": self.message}


class MissingFieldError(KeyError):
    """A step read a context field that no earlier step wrote."""


class FieldAlreadySetError(RuntimeError):
    """A step tried to overwrite a context field another step wrote."""


class PipelineConfigurationError(ValueError):
    """The step order of a pipeline reads a field before it is written."""

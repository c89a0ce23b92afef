"""Step-based pipeline for retrieval-augmented answering.

This module provides a pipeline abstraction where:
- Each Step builds its collaborator request and parses the reply
- Steps are chained in a fixed order checked at construction
- PipelineContext carries the per-query stash between steps
- Async execution is supported throughout
"""

from .base import Step, CollaboratorStep, StepOutcome, Pipeline
from .context import PipelineContext, ContextKey
from .transport import RequestDescriptor, CollaboratorResponse, Transport, HttpTransport

__all__ = [
    "Step",
    "CollaboratorStep",
    "StepOutcome",
    "Pipeline",
    "PipelineContext",
    "ContextKey",
    "RequestDescriptor",
    "CollaboratorResponse",
    "Transport",
    "HttpTransport",
]

"""computeless-rag: retrieval-augmented question answering over external services."""

from .errors import (
    PipelineError,
    CollaboratorError,
    TransportError,
    ValidationError,
)
from .pipeline.rag_pipeline import (
    QueryPipeline,
    StorePipeline,
    StoreAck,
    answer_query,
    store_query,
)

__all__ = [
    "PipelineError",
    "CollaboratorError",
    "TransportError",
    "ValidationError",
    "QueryPipeline",
    "StorePipeline",
    "StoreAck",
    "answer_query",
    "store_query",
]

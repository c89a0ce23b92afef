"""Embedder step: turns the query text into a vector."""

import json

from ...loader import EmbeddingConfig
from ...schemas import EmbeddingResponse
from ..base import CollaboratorStep
from ..context import PipelineContext
from ..context_keys import QUERY_EMBEDDING
from ..transport import RequestDescriptor


class EmbedderStep(CollaboratorStep):
    """Embeds the query with the pinned Bedrock embedding model."""

    collaborator = "bedrock"
    response_model = EmbeddingResponse
    provides = (QUERY_EMBEDDING,)

    def __init__(self, config: EmbeddingConfig | None = None):
        self.config = config or EmbeddingConfig()

    @property
    def name(self) -> str:
        return "EmbedderStep"

    def build_request(self, query: str, context: PipelineContext) -> RequestDescriptor:
        return RequestDescriptor(
            collaborator=self.collaborator,
            method="POST",
            path=f"/model/{self.config.model_id}/invoke",
            headers={"content-type": "application/json", "accept": "*/*"},
            body=json.dumps({"inputText": query}),
        )

    def apply(self, parsed: EmbeddingResponse, context: PipelineContext) -> None:
        context.set(QUERY_EMBEDDING, parsed.embedding)

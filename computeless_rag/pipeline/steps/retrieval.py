"""Retriever step: similarity search against the vector store."""

import json

from ...loader import VectorStoreConfig
from ...schemas import QueryResponse
from ..base import CollaboratorStep
from ..context import PipelineContext
from ..context_keys import PINECONE_API_KEY, QUERY_CONTEXTS, QUERY_EMBEDDING
from ..transport import RequestDescriptor


class RetrieverStep(CollaboratorStep):
    """
    Fetches the top-K nearest stored texts for the query embedding.

    Texts keep the order the store returned them in. No matches is a valid
    result and yields an empty list.
    """

    collaborator = "pinecone"
    response_model = QueryResponse
    requires = (QUERY_EMBEDDING, PINECONE_API_KEY)
    provides = (QUERY_CONTEXTS,)

    def __init__(self, config: VectorStoreConfig | None = None):
        self.config = config or VectorStoreConfig()

    @property
    def name(self) -> str:
        return "RetrieverStep"

    def build_request(self, query: str, context: PipelineContext) -> RequestDescriptor:
        return RequestDescriptor(
            collaborator=self.collaborator,
            method="POST",
            path="/query",
            headers={
                "Content-Type": "application/json",
                "Api-Key": context.get(PINECONE_API_KEY),
            },
            body=json.dumps(
                {
                    "namespace": self.config.namespace,
                    "vector": context.get(QUERY_EMBEDDING),
                    "topK": self.config.top_k,
                    "includeMetadata": True,
                }
            ),
        )

    def apply(self, parsed: QueryResponse, context: PipelineContext) -> None:
        context.set(QUERY_CONTEXTS, [match.metadata.text for match in parsed.matches])

"""Upsert step: stores the query text and its embedding as a new vector."""

import json
import logging
import uuid
from typing import Callable, Optional

import pydantic

from ...loader import VectorStoreConfig
from ...schemas import UpsertResponse
from ..base import CollaboratorStep, StepOutcome
from ..context import PipelineContext
from ..context_keys import PINECONE_API_KEY, QUERY_EMBEDDING, UPSERTED_VECTOR_ID
from ..transport import CollaboratorResponse, RequestDescriptor

logger = logging.getLogger(__name__)

# Vector ids are generated once per request phase and carried to the
# response phase through the context metadata.
_PENDING_ID = "upsert.pending_vector_id"


class UpsertStep(CollaboratorStep):
    collaborator = "pinecone"
    response_model = UpsertResponse
    requires = (QUERY_EMBEDDING, PINECONE_API_KEY)
    provides = (UPSERTED_VECTOR_ID,)

    def __init__(
        self,
        config: VectorStoreConfig | None = None,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        self.config = config or VectorStoreConfig()
        self.id_factory = id_factory or (lambda: str(uuid.uuid4()))

    @property
    def name(self) -> str:
        return "UpsertStep"

    def build_request(self, query: str, context: PipelineContext) -> RequestDescriptor:
        vector_id = self.id_factory()
        context.set_metadata(_PENDING_ID, vector_id)

        return RequestDescriptor(
            collaborator=self.collaborator,
            method="POST",
            path="/vectors/upsert",
            headers={
                "Content-Type": "application/json",
                "Api-Key": context.get(PINECONE_API_KEY),
            },
            body=json.dumps(
                {
                    "namespace": self.config.namespace,
                    "vectors": [
                        {
                            "id": vector_id,
                            "values": context.get(QUERY_EMBEDDING),
                            "metadata": {"text": query},
                        }
                    ],
                }
            ),
        )

    def handle_response(
        self, response: Optional[CollaboratorResponse], context: PipelineContext
    ) -> StepOutcome:
        if response is None or not response.is_success:
            return super().handle_response(response, context)

        # Any 2xx means the vector was written; the body is informational only
        try:
            parsed = UpsertResponse.model_validate_json(response.body)
        except pydantic.ValidationError:
            parsed = UpsertResponse()

        self.apply(parsed, context)
        return StepOutcome.proceed()

    def apply(self, parsed: UpsertResponse, context: PipelineContext) -> None:
        vector_id = context.get_metadata(_PENDING_ID)
        logger.info(
            f"Pinecone vector upsert succeeded: id={vector_id} "
            f"namespace={self.config.namespace} upserted={parsed.upserted_count}"
        )
        context.set(UPSERTED_VECTOR_ID, vector_id)

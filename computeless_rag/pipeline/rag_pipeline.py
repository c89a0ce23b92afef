"""Query and store pipeline orchestration for the RAG service."""

import logging
from typing import Any

from pydantic import BaseModel

from ..errors import ValidationError
from ..loader import PipelineConfig, load_pipeline_config
from .base import Pipeline
from .context import PipelineContext
from .context_keys import QUERY_ANSWER, UPSERTED_VECTOR_ID
from .transport import Transport
from .steps import (
    EmbedderStep,
    GeneratorStep,
    PromptBuilderStep,
    RetrieverStep,
    SecretProviderStep,
    UpsertStep,
)

logger = logging.getLogger(__name__)


class StoreAck(BaseModel):
    """Acknowledgement returned by the store path."""

    vector_id: str
    namespace: str


def validate_query(query: Any) -> str:
    """
    Reject input no step could sensibly work with.

    Raises:
        ValidationError: If query is not a string or is blank
    """
    if not isinstance(query, str):
        raise ValidationError(f"query must be a string, got {type(query).__name__}")
    if not query.strip():
        raise ValidationError("query must not be empty")
    return query


class QueryPipeline:
    """
    Read path: answers a question from the stored texts.

    Pipeline flow:
    1. Secret Provider (Pinecone API key)
    2. Embedder (query vector)
    3. Retriever (top-K stored texts)
    4. Prompt Builder (grounded prompt, local)
    5. Generator (model answer)
    """

    def __init__(
        self, transport: Transport | None = None, config: PipelineConfig | None = None
    ):
        self.config = config or load_pipeline_config()
        self.pipeline = Pipeline(
            [
                SecretProviderStep(self.config.secrets),
                EmbedderStep(self.config.embedding),
                RetrieverStep(self.config.vector_store),
                PromptBuilderStep(self.config.prompt),
                GeneratorStep(self.config.generation),
            ],
            transport=transport,
        )

    async def run_with_context(self, query: str) -> PipelineContext:
        """Run the pipeline and return the full context (stash and timings)."""
        context = PipelineContext(query=validate_query(query))
        logger.info(f"Answering query ({len(query)} chars)")
        return await self.pipeline.execute(context)

    async def run(self, query: str) -> str:
        """
        Answer a query.

        Returns:
            The model's answer text

        Raises:
            PipelineError: The first step failure, unchanged
        """
        context = await self.run_with_context(query)
        return context.get(QUERY_ANSWER)


class StorePipeline:
    """
    Write path: embeds a text and upserts it into the namespace.

    Pipeline flow:
    1. Secret Provider (Pinecone API key)
    2. Embedder (text vector)
    3. Upsert (new vector with the text as metadata)
    """

    def __init__(
        self, transport: Transport | None = None, config: PipelineConfig | None = None
    ):
        self.config = config or load_pipeline_config()
        self.pipeline = Pipeline(
            [
                SecretProviderStep(self.config.secrets),
                EmbedderStep(self.config.embedding),
                UpsertStep(self.config.vector_store),
            ],
            transport=transport,
        )

    async def run(self, query: str) -> StoreAck:
        context = PipelineContext(query=validate_query(query))
        logger.info(f"Storing query ({len(query)} chars)")
        await self.pipeline.execute(context)

        return StoreAck(
            vector_id=context.get(UPSERTED_VECTOR_ID),
            namespace=self.config.vector_store.namespace,
        )


async def answer_query(
    query: str,
    transport: Transport | None = None,
    config: PipelineConfig | None = None,
) -> str:
    """
    Convenience function to run the query pipeline once.

    Args:
        query: Question text
        transport: Collaborator transport (pooled HTTP by default)
        config: Pipeline settings (loaded from YAML by default)

    Returns:
        The answer text
    """
    return await QueryPipeline(transport=transport, config=config).run(query)


async def store_query(
    query: str,
    transport: Transport | None = None,
    config: PipelineConfig | None = None,
) -> StoreAck:
    """Convenience function to run the store pipeline once."""
    return await StorePipeline(transport=transport, config=config).run(query)

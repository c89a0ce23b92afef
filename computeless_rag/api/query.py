"""Query and store API endpoints."""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from computeless_rag.dependencies import get_query_pipeline, get_store_pipeline
from computeless_rag.http_pool import check_http_clients_health
from computeless_rag.pipeline.rag_pipeline import QueryPipeline, StoreAck, StorePipeline

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["rag"])


class QueryRequest(BaseModel):
    """Request model for both the query and the store endpoint."""

    query: str = Field(description="Question (query) or text to store (store)")


class AnswerResponse(BaseModel):
    answer: str


@router.post("/query", response_model=AnswerResponse)
async def answer(
    request: QueryRequest, pipeline: QueryPipeline = Depends(get_query_pipeline)
) -> AnswerResponse:
    """
    Answer a question from the stored texts.

    Errors are translated by the exception handlers in ``main``: a
    collaborator's non-success reply is returned with its own status code
    and body.

    Example Response:
        {"answer": "30 days."}
    """
    return AnswerResponse(answer=await pipeline.run(request.query))


@router.post("/store", response_model=StoreAck)
async def store(
    request: QueryRequest, pipeline: StorePipeline = Depends(get_store_pipeline)
) -> StoreAck:
    """
    Embed a text and upsert it into the vector store.

    Example Response:
        {"vector_id": "5c0e...", "namespace": "computeless-rag"}
    """
    return await pipeline.run(request.query)


@router.get("/health")
async def health() -> Dict[str, Any]:
    """Report the state of the collaborator HTTP clients."""
    return await check_http_clients_health()

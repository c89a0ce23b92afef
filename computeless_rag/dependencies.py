"""FastAPI dependency injection utilities.

Pipelines hold only configuration, so one instance of each is shared by
every request; each run still gets its own PipelineContext.
"""

import logging
from functools import lru_cache

from .loader import load_pipeline_config
from .pipeline.rag_pipeline import QueryPipeline, StorePipeline

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_query_pipeline() -> QueryPipeline:
    """
    FastAPI dependency for the read path.

    Example:
        @router.post("/api/query")
        async def query(pipeline: QueryPipeline = Depends(get_query_pipeline)):
            ...
    """
    logger.info("Building query pipeline")
    return QueryPipeline(config=load_pipeline_config())


@lru_cache(maxsize=1)
def get_store_pipeline() -> StorePipeline:
    """FastAPI dependency for the write path."""
    logger.info("Building store pipeline")
    return StorePipeline(config=load_pipeline_config())

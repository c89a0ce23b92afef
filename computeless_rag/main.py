"""FastAPI app exposing the computeless RAG pipelines."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .api import query
from .config import LOG_LEVEL
from .errors import CollaboratorError, PipelineError, TransportError, ValidationError
from .http_pool import close_http_clients, init_http_clients

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_http_clients()
    try:
        yield
    finally:
        await close_http_clients()


app = FastAPI(title="Computeless RAG API", lifespan=lifespan)
app.include_router(query.router)


# ============================================================================
# ERROR HANDLERS
# ============================================================================


@app.exception_handler(CollaboratorError)
async def collaborator_error_handler(request: Request, exc: CollaboratorError):
    # Pass the collaborator's status code and body through untouched
    logger.warning(
        f"{request.url.path}: {exc.collaborator} returned HTTP {exc.status_code} "
        f"in {exc.step}"
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(TransportError)
async def transport_error_handler(request: Request, exc: TransportError):
    logger.error(f"{request.url.path}: {exc.message}")
    return JSONResponse(status_code=502, content=exc.to_dict())


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=422, content=exc.to_dict())


@app.exception_handler(PipelineError)
async def pipeline_error_handler(request: Request, exc: PipelineError):
    logger.error(f"{request.url.path}: {exc.message}")
    return JSONResponse(status_code=500, content=exc.to_dict())


if __name__ == "__main__":
    import uvicorn

    from .config import API_PORT

    uvicorn.run(app, host="0.0.0.0", port=API_PORT)

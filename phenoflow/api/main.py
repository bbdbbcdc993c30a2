"""Phenoflow API - Phenotype Repository Service.

This API manages computable phenotypes stored as GitHub repositories:
- Phenotypes (repositories with a README description and a root workflow)
- Steps (CWL files referenced by the workflow, with JS/Python implementations)
- Files (raw repository content)

Every failure answers 500 with a fixed plain-text body; details go to the log.
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from phenoflow import __version__
from phenoflow.api.routes import files, meta, phenotypes, steps
from phenoflow.config import get_settings
from phenoflow.core.exceptions import PhenoflowError
from phenoflow.persistence.factory import close_content_store, get_content_store

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

ERROR_MESSAGE = "Sorry an error occurred"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    settings = get_settings()
    store = get_content_store()
    logger.info(
        f"Using {store.kind} content store (owner={settings.owner or '-'}, "
        f"committer={settings.user_name})"
    )
    logger.info(f"Keeping repositories: {', '.join(settings.keep_repositories) or '-'}")
    logger.info("Phenoflow API ready")
    yield
    # Shutdown
    logger.info("Shutting down Phenoflow API")
    await close_content_store()


# Create FastAPI app
app = FastAPI(
    title="Phenoflow API",
    description="""
## Phenotype Repository Service

Phenotypes live as repositories in a single GitHub organisation.

### Key Endpoints

- `GET /phenotypes` - List phenotypes (filter by `author`, `name`)
- `POST /phenotype` - Create a phenotype with README and LICENSE
- `GET /phenotype/{name}/description` - README description text
- `GET /step/{step}/implementation` - Implementation files of a step
- `DELETE /phenotype/{name}` - Delete a phenotype (creator only)
""",
    version=__version__,
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(PhenoflowError)
async def phenoflow_error_handler(request: Request, exc: PhenoflowError):
    logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return PlainTextResponse(ERROR_MESSAGE, status_code=500)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.error(f"{request.method} {request.url.path} invalid request: {exc.errors()}")
    return PlainTextResponse(ERROR_MESSAGE, status_code=500)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"{request.method} {request.url.path} unexpected error: {exc}")
    return PlainTextResponse(ERROR_MESSAGE, status_code=500)


# Include routers
app.include_router(meta.router)
app.include_router(phenotypes.router)
app.include_router(steps.router)
app.include_router(files.router)


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=get_settings().port)

"""
FastAPI Application

Main application setup and configuration.

Usage:
    uvicorn api.app:app --reload

    # Or run directly
    python -m api.app
"""

import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import health, verify, batches
from api.errors import APIError, api_error_handler, generic_error_handler, rowproof_error_handler
from core.schemas.errors import RowproofException


# Configure logging from ROWPROOF_LOG_LEVEL
logging.basicConfig(
    level=getattr(logging, os.getenv("ROWPROOF_LOG_LEVEL", "INFO").upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="Rowproof API",
        description="""
HTTP API for verifying CSV row inclusion proofs against per-batch Merkle roots.

## Endpoints

- **POST /verify** - Verify a leaf and proof against a root
- **GET /batches** - Dataset index of committed batch roots
- **GET /batches/{batch_id}/proofs/{row_offset}** - Stored proof for one row, verified
- **GET /health** - Health check

## Trusted roots

When anchor records are configured (`ROWPROOF_ANCHORS_PATH`), stored proofs
are verified against the anchored `merkleRoot`; otherwise against the
bundle's own root.
        """,
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register exception handlers
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(RowproofException, rowproof_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    # Include routers
    app.include_router(health.router)
    app.include_router(verify.router)
    app.include_router(batches.router)

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)

"""
Minimal API (FastAPI)

HTTP API for row proof verification:
- POST /verify - Verify a leaf against a root with an inclusion proof
- GET /batches/{batch_id}/proofs/{row_offset} - Fetch and verify a stored proof
- GET /health - Health check

Usage:
    uvicorn api.app:app --reload
"""

__version__ = "0.1.0"

"""
FastAPI Application for txselect.

A thin layer that delegates all selection logic to txselect.engine.

Endpoints:
    GET /health - Health check
    POST /api/preview - Preview selection over a caller-supplied pool
    GET /api/preview/demo - Preview selection over the demo pool
"""

import logging
import os
from pathlib import Path

# Load .env file if it exists
from dotenv import load_dotenv

env_path = Path(__file__).parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)
    print(f"[ENV] Loaded .env from {env_path}")
from typing import Optional

from fastapi import FastAPI, HTTPException, Query, status

from txselect.config import DEFAULT_SELECTION_CONFIG, SelectionConfig
from txselect.demo import demo_pool
from txselect.engine.explanations import explain_selection
from txselect.engine.pool import filter_pool, summarize_pool
from txselect.engine.selector import trace_selection
from txselect.exceptions import InvalidConstraint, InvalidTransaction
from txselect.models import (
    ErrorResponse,
    NoncePolicy,
    PreviewRequest,
    PreviewResponse,
    SelectionConstraints,
    Transaction,
)


logger = logging.getLogger(__name__)

SERVICE_NAME = "txselect API"
SERVICE_VERSION = "1.0.0"


def get_selection_config() -> SelectionConfig:
    """
    Get the selection config based on environment configuration.

    TXSELECT_NONCE_POLICY=strict|lenient overrides the default nonce policy.
    """
    policy = os.environ.get("TXSELECT_NONCE_POLICY")
    if policy:
        return DEFAULT_SELECTION_CONFIG.model_copy(
            update={"nonce_policy": NoncePolicy(policy.strip().lower())}
        )
    return DEFAULT_SELECTION_CONFIG


# =============================================================================
# FastAPI Application
# =============================================================================

app = FastAPI(
    title="txselect API",
    version=SERVICE_VERSION,
    description="Mempool transaction selection preview",
)


# =============================================================================
# Shared Preview Logic
# =============================================================================


def run_preview(
    transactions: list[Transaction],
    constraints: SelectionConstraints,
    query: Optional[str],
    config: SelectionConfig,
) -> PreviewResponse:
    """
    Filter the pool, run selection and assemble the preview response.

    Maps caller-input errors to 400 responses; an invalid constraint is a
    blocked action with a message, never an empty selection.
    """
    pool = filter_pool(transactions, query)

    try:
        trace = trace_selection(pool, constraints, config)
    except InvalidConstraint as e:
        logger.info(f"Preview rejected (constraint): {e}")
        error_response = ErrorResponse(
            error="Invalid constraint",
            detail=str(e),
            code="INVALID_CONSTRAINT",
        )
        raise HTTPException(status_code=400, detail=error_response.model_dump())
    except InvalidTransaction as e:
        logger.info(f"Preview rejected (transaction {e.tx_id}): {e}")
        error_response = ErrorResponse(
            error="Invalid transaction",
            detail=str(e),
            code="INVALID_TRANSACTION",
            tx_id=e.tx_id,
        )
        raise HTTPException(status_code=400, detail=error_response.model_dump())

    logger.info(
        f"Preview: pool={len(pool)} eligible={trace.result.eligible_count} "
        f"picked={len(trace.result.picked)} gas={trace.result.gas_used} "
        f"stop={trace.result.stop_reason.value}"
    )

    return PreviewResponse(
        constraints=constraints,
        result=trace.result,
        decisions=trace.decisions,
        explanation=explain_selection(trace, constraints),
        pool=summarize_pool(pool, config),
    )


def internal_error(e: Exception) -> HTTPException:
    """Log an unexpected failure and wrap it as a 500 ErrorResponse."""
    logger.exception("Preview failed (unexpected)")
    error_response = ErrorResponse(
        error="Internal error",
        detail=str(e),
        code="INTERNAL_ERROR",
    )
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=error_response.model_dump(),
    )


# =============================================================================
# Endpoints
# =============================================================================


@app.get(
    "/health",
    summary="Health check",
    description="Returns service health status",
    tags=["System"],
)
def health_check() -> dict:
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
    }


@app.post(
    "/api/preview",
    response_model=PreviewResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid constraint or transaction"},
        500: {"model": ErrorResponse, "description": "Internal error"},
    },
    tags=["Preview"],
)
def create_preview(request: PreviewRequest) -> PreviewResponse:
    """
    Preview block selection over a caller-supplied mempool snapshot.

    Status Codes:
        200: Success (including empty selections)
        400: Invalid constraint (negative max_gas/max_txs) or transaction (negative gas)
        422: Pydantic validation error (automatic)
        500: Internal error
    """
    try:
        config = get_selection_config()
        constraints = request.constraints or config.default_constraints()
        return run_preview(request.transactions, constraints, request.query, config)
    except HTTPException:
        raise
    except Exception as e:
        raise internal_error(e)


@app.get(
    "/api/preview/demo",
    response_model=PreviewResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid constraint"},
        500: {"model": ErrorResponse, "description": "Internal error"},
    },
    tags=["Preview"],
)
def demo_preview(
    base_fee: Optional[float] = Query(None, description="Minimum price (default from config)"),
    max_gas: Optional[int] = Query(None, description="Gas budget (default from config)"),
    max_txs: Optional[int] = Query(None, description="Tx count cap (default from config)"),
    q: Optional[str] = Query(None, description="Search filter on tx id or sender"),
) -> PreviewResponse:
    """
    Preview block selection over the built-in demo pool.

    Omitted query parameters fall back to the configured defaults.
    """
    try:
        config = get_selection_config()
        defaults = config.default_constraints()
        constraints = SelectionConstraints(
            base_fee=defaults.base_fee if base_fee is None else base_fee,
            max_gas=defaults.max_gas if max_gas is None else max_gas,
            max_txs=defaults.max_txs if max_txs is None else max_txs,
        )
        return run_preview(demo_pool(), constraints, q, config)
    except HTTPException:
        raise
    except Exception as e:
        raise internal_error(e)

"""
Pydantic models for txselect.

This module contains all data models used by the selection engine and the API.
Models handle validation and serialization only - no business logic.
"""

from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================


class NoncePolicy(str, Enum):
    """How a sender's queue treats missing or fee-ineligible predecessors."""

    STRICT = "strict"  # ineligible or missing nonce blocks every successor
    LENIENT = "lenient"  # ineligible txs are dropped; queue starts at lowest eligible nonce


class StopReason(str, Enum):
    """Why the admission loop ended."""

    TX_LIMIT = "tx_limit"
    EXHAUSTED = "exhausted"


class TxStatus(str, Enum):
    """Disposition of a single transaction after a selection round."""

    PICKED = "picked"
    BELOW_BASE_FEE = "below_base_fee"
    NONCE_GAP = "nonce_gap"
    DUPLICATE_NONCE = "duplicate_nonce"
    GAS_SKIPPED = "gas_skipped"
    PREDECESSOR_SKIPPED = "predecessor_skipped"
    NOT_REACHED = "not_reached"


# =============================================================================
# Input Models
# =============================================================================


class Transaction(BaseModel):
    """
    A pending transaction in the mempool snapshot.

    gas is not bounded here; the engine rejects negative values with
    InvalidTransaction naming the offending id.
    """

    id: str = Field(..., description="Opaque unique identifier")
    sender: str = Field(..., description="Originating account")
    nonce: int = Field(..., ge=0, description="Per-sender sequence number")
    gas: int = Field(..., description="Resource cost of inclusion")
    price: float = Field(..., ge=0, description="Fee rate used for priority")
    age_sec: Optional[float] = Field(None, ge=0, description="Display only")


class SelectionConstraints(BaseModel):
    """
    Policy and resource limits for one admission round.

    Signs of max_gas / max_txs are checked by the engine (InvalidConstraint).
    """

    base_fee: float = Field(..., description="Minimum price to be eligible")
    max_gas: int = Field(..., description="Total gas budget for the round")
    max_txs: int = Field(..., description="Maximum number of admitted txs")


# =============================================================================
# Output Models
# =============================================================================


class SelectionResult(BaseModel):
    """Outcome of one admission round."""

    picked: list[Transaction] = Field(
        default_factory=list, description="Admitted txs in admission order"
    )
    gas_used: int = Field(0, ge=0, description="Sum of gas over picked")
    avg_price: float = Field(
        0.0, ge=0, description="Unrounded mean price over picked (0 if empty)"
    )
    eligible_count: int = Field(0, ge=0, description="Txs with price >= base_fee")
    skipped: list[str] = Field(
        default_factory=list, description="Ids dropped because gas did not fit"
    )
    stop_reason: StopReason = Field(StopReason.EXHAUSTED)


class TxDecision(BaseModel):
    """Per-transaction disposition, aligned with input order."""

    tx_id: str
    sender: str
    nonce: int
    status: TxStatus


class SelectionTrace(BaseModel):
    """Selection result plus the decision taken for every input transaction."""

    result: SelectionResult
    decisions: list[TxDecision] = Field(default_factory=list)


# =============================================================================
# Pool View Models
# =============================================================================


class HistogramBucket(BaseModel):
    """A price bucket covering [low, high]."""

    label: str
    low: float
    high: float
    count: int = Field(..., ge=1)


class SenderQueue(BaseModel):
    """All pool transactions of one sender, nonce ascending."""

    sender: str
    transactions: list[Transaction] = Field(default_factory=list)
    count: int = Field(0, ge=0)


class PoolSummary(BaseModel):
    """Aggregate view of the (filtered) pool shown beside the preview."""

    pool_size: int = Field(0, ge=0)
    histogram: list[HistogramBucket] = Field(default_factory=list)
    senders: list[SenderQueue] = Field(default_factory=list)


# =============================================================================
# Explanation Models
# =============================================================================


class ExplanationNode(BaseModel):
    """
    A single explanation item with machine-readable metadata.
    The engine produces these; the UI renders them to text.
    """

    id: str = Field(..., description="Unique identifier for this node")
    label: str = Field(..., description="Human-readable label")
    severity: Literal["info", "warning", "error"] = Field(..., description="Severity level")
    category: Literal["constraint", "ordering"] = Field(..., description="Node category")
    metric: Optional[str] = Field(None, description="Related metric (e.g., 'gas_used')")
    value: Optional[float] = Field(None, description="Observed value")
    threshold: Optional[float] = Field(None, description="Constraint threshold if applicable")
    tx_ids: Optional[list[str]] = Field(None, description="Related transaction ids")
    detail: Optional[str] = Field(None, description="Additional context")


class Explanation(BaseModel):
    """Structured explanation of a selection round."""

    summary: str = Field(..., description="One-line summary")
    nodes: list[ExplanationNode] = Field(default_factory=list)


# =============================================================================
# API Models
# =============================================================================


class PreviewRequest(BaseModel):
    """Request body for POST /api/preview."""

    transactions: list[Transaction] = Field(default_factory=list)
    constraints: Optional[SelectionConstraints] = Field(
        None, description="Defaults to the configured constraints when omitted"
    )
    query: Optional[str] = Field(None, description="Search filter on tx id or sender")


class PreviewResponse(BaseModel):
    """Response body for the preview endpoints."""

    constraints: SelectionConstraints
    result: SelectionResult
    decisions: list[TxDecision] = Field(default_factory=list)
    explanation: Explanation
    pool: PoolSummary


class ErrorResponse(BaseModel):
    """Error response body for API errors."""

    error: str = Field(..., description="Short error description")
    detail: Optional[str] = Field(None, description="Detailed error message")
    code: str = Field(..., description="Error code (e.g., 'INVALID_CONSTRAINT')")
    tx_id: Optional[str] = Field(None, description="Offending transaction, if any")

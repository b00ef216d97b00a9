"""
Selection configuration for txselect.

All configurable parameters live here - no magic numbers in engine code.
Defaults mirror the Mempool page's initial controls.
"""

from pydantic import BaseModel, Field

from txselect.models import NoncePolicy, SelectionConstraints


class SelectionConfig(BaseModel):
    """
    Configurable parameters for the selection engine and pool views.

    Passed explicitly to engine functions rather than hardcoded.
    """

    # Queue construction
    nonce_policy: NoncePolicy = Field(
        default=NoncePolicy.STRICT,
        description=(
            "strict: ineligible or missing nonce blocks successors; "
            "lenient: ineligible txs dropped, queue starts at lowest eligible nonce"
        ),
    )

    # Pool views
    histogram_buckets: int = Field(
        default=8, ge=1, description="Target number of price histogram buckets"
    )

    # Default constraints (used when a request omits them)
    default_base_fee: float = Field(default=15, ge=0, description="Default minimum price")
    default_max_gas: int = Field(default=150_000, ge=0, description="Default gas budget")
    default_max_txs: int = Field(default=5, ge=0, description="Default tx count cap")

    def default_constraints(self) -> SelectionConstraints:
        """Build SelectionConstraints from the configured defaults."""
        return SelectionConstraints(
            base_fee=self.default_base_fee,
            max_gas=self.default_max_gas,
            max_txs=self.default_max_txs,
        )


DEFAULT_SELECTION_CONFIG = SelectionConfig()

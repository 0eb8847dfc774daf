"""Conversion contracts: fail-fast enforcement of stage invariants.

This package enforces semantic guarantees between conversion stages.
Contracts fail immediately and loudly when a stage doesn't produce its
promised invariants.

Key principle:
- Pydantic validates config correctness
- require(..., InvalidInput) validates caller input
- Contracts validate conversion correctness
"""

from rasterhex.contracts.failure import ContractViolation
from rasterhex.contracts.base import require
from rasterhex.contracts.raster import (
    assert_georeferenced,
    assert_normalized,
    assert_partitioned,
)
from rasterhex.contracts.coverage import assert_single_resolution

__all__ = [
    "ContractViolation",
    "require",
    "assert_georeferenced",
    "assert_normalized",
    "assert_partitioned",
    "assert_single_resolution",
]

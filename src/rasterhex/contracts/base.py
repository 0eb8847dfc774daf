"""Base contract enforcement utilities.

The require() function is the single enforcement mechanism for all contracts
and for input validation at the public boundary.
"""

from rasterhex.contracts.failure import ContractViolation


def require(condition: bool, message: str, error: type = ContractViolation) -> None:
    """Enforce a contract or an input precondition.

    Called at stage boundaries to verify the preceding stage produced the
    guaranteed invariants, and at the public boundary (with ``error`` set to
    ``InvalidInput``) to reject unusable input. It is fail-fast: no
    recovery, no fallback, no silence.

    Parameters
    ----------
    condition : bool
        The invariant that must be true.

    message : str
        Error message explaining the violation (for debugging).

    error : type, optional
        Exception class to raise. Defaults to ContractViolation.

    Raises
    ------
    ContractViolation
        If condition is False and no other error type was given.

    Examples
    --------
    >>> require(len(chunks) > 0, "Partition contract: at least one chunk expected")
    >>> require(np.isfinite(width), "pixel width must be finite", InvalidInput)
    """
    if not condition:
        raise error(message)

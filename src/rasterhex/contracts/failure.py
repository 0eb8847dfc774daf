"""Centralized failure type for contract violations.

Contracts fail fast, loud, and once. All violations raise the same
exception type, allowing callers to handle pipeline bugs uniformly.
"""


class ContractViolation(RuntimeError):
    """Raised when a conversion stage contract is violated.

    This indicates a bug in conversion logic, not bad user input. It means a
    stage did not produce the invariants it promised (for example a
    partition that drops samples, or a coverage mixing resolutions).

    Key distinction:
    - InvalidInput: caller supplied something unusable
    - ContractViolation: conversion bug (programmer error)
    - ValidationError: configuration rejected by Pydantic
    """
    pass

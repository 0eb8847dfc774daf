"""Coverage stage contract.

Enforces the guarantee that a finished coverage is keyed by cells of a
single resolution.
"""

from rasterhex.contracts.base import require


def assert_single_resolution(coverage, provider) -> None:
    """Enforce coverage contract.

    Called after the final reduction. Verifies that every key of the
    coverage is a cell at ``coverage.resolution``.

    Parameters
    ----------
    coverage : CellCoverage
        Reduced coverage.

    provider : HexGridProvider
        Provider used to read the resolution of each cell.

    Raises
    ------
    ContractViolation
        If any invariant is violated
    """
    require(
        provider.min_resolution <= coverage.resolution <= provider.max_resolution,
        f"Coverage contract violated: resolution {coverage.resolution} out of range"
    )
    for cell in coverage:
        cell_res = provider.resolution_of(cell)
        require(
            cell_res == coverage.resolution,
            f"Coverage contract violated: cell {cell} has resolution {cell_res}, "
            f"expected {coverage.resolution}"
        )

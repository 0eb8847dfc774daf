"""Formal conversion invariants.

This file documents what each stage MUST produce. This is architecture, not code.
Use this file as a reviewer anchor and system reference.
"""

CONVERSION_INVARIANTS = {
    "input": [
        "Raster is a 2-D array (or a 2-D DataArray with x/y coordinates)",
        "GeoTransform coefficients are finite and the map is invertible",
        "Pixel sizes are finite and positive; resolution range is non-empty",
    ],

    "resolution": [
        "Chosen resolution lies inside the requested inclusive range",
        "Uniformly larger pixels never select a finer resolution",
        "Ties go to the coarser resolution",
    ],

    "antimeridian": [
        "One window when the extent stays inside [-180, 180), two otherwise",
        "Each sample belongs to exactly one normalized window",
        "Longitudes inside each normalized window are monotonic",
    ],

    "partition": [
        "Chunks lie inside their window and never overlap",
        "Every sample kept by the predicate is covered by exactly one chunk",
    ],

    "coverage": [
        "All keys share the coverage resolution",
        "Samples rejected by the predicate never contribute",
        "Result does not depend on chunking, scheduler or completion order",
    ],
}

# Which stages always run
STAGE_REQUIREMENTS = {
    "input": "REQUIRED",
    "resolution": "OPTIONAL",    # Skipped when a fixed resolution is given
    "antimeridian": "REQUIRED",
    "partition": "REQUIRED",
    "coverage": "REQUIRED",
}

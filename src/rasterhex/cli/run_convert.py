"""Core conversion runner behind the ``rasterhex-convert`` command.

This module contains the actual runner, separated from argument parsing
details. Scripts are thin wrappers; this is the real implementation.
"""

import argparse
import importlib.util
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import numpy as np

from rasterhex.grid import default_provider
from rasterhex.pipeline.orchestrator import convert_with_config
from rasterhex.schemas import resolve_config, ParamConfig, UserConfig, CLIConfig

__all__ = ['load_user_config_dict', 'setup_logging', 'run_conversion', 'main']

logger = logging.getLogger(__name__)


def load_user_config_dict(config_path: str) -> dict:
    """Load user config dict from Python file.

    Returns the raw dict before Pydantic validation.

    Parameters
    ----------
    config_path : str
        Path to user config Python file containing CONFIG dict.

    Returns
    -------
    dict
        Raw user configuration dictionary.

    Raises
    ------
    FileNotFoundError
        If config file does not exist.
    ValueError
        If no CONFIG dict found in file.
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")

    spec = importlib.util.spec_from_file_location("config_module", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    # Find CONFIG dict
    for name in dir(module):
        if name.startswith('CONFIG'):
            obj = getattr(module, name)
            if isinstance(obj, dict):
                return obj

    raise ValueError(f"No CONFIG dict found in {path}")


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """Configure the root logger with a console and an optional file handler."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    formatter = logging.Formatter(
        fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # Clear existing handlers and add new ones
    root = logging.getLogger()
    root.setLevel(log_level)
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_file)
        fh.setLevel(log_level)
        fh.setFormatter(formatter)
        root.addHandler(fh)

    ch = logging.StreamHandler()
    ch.setLevel(log_level)
    ch.setFormatter(formatter)
    root.addHandler(ch)

    logger.debug("Logging: level=%s, file=%s", logging.getLevelName(log_level), log_file)


def run_conversion(
    user_config_path: str,
    array_path: str,
    cli_args: Optional[Dict[str, Any]] = None,
    verbose: bool = False,
):
    """Convert a ``.npy`` raster with settings from a user config file.

    1. Loads and resolves configuration (Param < User < CLI)
    2. Configures logging
    3. Loads the array and converts it
    4. Writes the coverage as CSV when an output path is configured

    Parameters
    ----------
    user_config_path : str
        Path to user config file (Python file with CONFIG dict).

    array_path : str
        Path to a 2-D array saved with ``numpy.save``.

    cli_args : dict, optional
        CLI argument overrides. Keys: resolution, mode, aggregation,
        scheduler, workers, chunk_size, chunk_count, sampling, output,
        log_level.
        All optional.

    verbose : bool, optional
        If True, enable DEBUG logging and print the resolved config.

    Returns
    -------
    CellCoverage
        The finalized coverage.

    Raises
    ------
    FileNotFoundError
        If the config or array file does not exist.
    ValidationError
        If configuration validation fails.
    RasterHexError
        If the conversion fails.
    """
    user_cfg = UserConfig.model_validate(load_user_config_dict(user_config_path))

    cli_args = dict(cli_args or {})
    if verbose and cli_args.get("log_level") is None:
        cli_args["log_level"] = "DEBUG"
    cli_dict = {k: v for k, v in cli_args.items() if v is not None}
    cli_cfg = CLIConfig.model_validate(cli_dict) if cli_dict else CLIConfig()

    config = resolve_config(ParamConfig(), user_cfg, cli_cfg)
    setup_logging(config.logging.level, config.logging.file)

    if verbose:
        print("\nFull Internal Configuration:")
        print(json.dumps(config.model_dump(), indent=2))

    array = np.load(array_path, allow_pickle=False)
    logger.info("Loaded %s with shape %s and dtype %s", array_path, array.shape, array.dtype)

    provider = default_provider()
    coverage = convert_with_config(array, config, provider=provider)

    if config.output.path is not None:
        out = Path(config.output.path)
        out.parent.mkdir(parents=True, exist_ok=True)
        df = coverage.to_dataframe(provider, include_boundary=config.output.include_boundary)
        df.to_csv(out, index=False)
        logger.info("Wrote %d cells to %s", len(df), out)

    return coverage


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rasterhex-convert",
        description="Convert a georeferenced raster to H3 cells",
    )
    parser.add_argument("config", help="Path to user config file")
    parser.add_argument("array", help="Path to a 2-D .npy array")
    parser.add_argument("--resolution", type=int, help="Fixed H3 resolution (skips the search)")
    parser.add_argument(
        "--mode", choices=["smaller_than_pixel", "min_diff", "min_ratio"],
        help="Resolution search mode",
    )
    parser.add_argument(
        "--aggregation",
        choices=["sum", "count", "min", "max", "mean", "collect", "majority", "unique"],
        help="Aggregation policy",
    )
    parser.add_argument("--scheduler", choices=["sequential", "thread", "process"])
    parser.add_argument("--workers", type=int, help="Worker pool size")
    chunks = parser.add_mutually_exclusive_group()
    chunks.add_argument("--chunk-size", type=int, help="Tile edge length in pixels")
    chunks.add_argument("--chunk-count", type=int, help="Number of row bands")
    parser.add_argument(
        "--sampling", choices=["pixel_center", "cell_centroid"],
        help="Look up pixel centres, or read the pixel under each cell centroid",
    )
    parser.add_argument("--output", help="CSV output path")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    cli_args = {
        "resolution": args.resolution,
        "mode": args.mode,
        "aggregation": args.aggregation,
        "scheduler": args.scheduler,
        "workers": args.workers,
        "chunk_size": args.chunk_size,
        "chunk_count": args.chunk_count,
        "sampling": args.sampling,
        "output": args.output,
    }
    coverage = run_conversion(args.config, args.array, cli_args, verbose=args.verbose)
    print(f"{len(coverage)} cells at resolution {coverage.resolution}")
    return 0

"""Command-line probe for decoded grib2json record files."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from .config import load_config
from .grids.field import build_grid
from .recipes import default_catalog
from .records import RawRecord

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Interpolate a gridded field at a point")
    parser.add_argument("--records", required=True, help="Path to decoded records JSON (list of header/data objects)")
    parser.add_argument("--lon", type=float, default=None, help="Query longitude in degrees")
    parser.add_argument("--lat", type=float, default=None, help="Query latitude in degrees")
    parser.add_argument("--config", default=None, help="Path to config JSON")
    parser.add_argument("--log-level", default=None, help="Log level override (DEBUG, INFO, ...)")
    parser.add_argument("--summary", action="store_true", help="Print grid dimensions and missing-cell count")
    return parser


def load_records_json(path: str | Path) -> list[RawRecord]:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Records file not found: {p}")

    with p.open("r", encoding="utf-8") as f:
        raw = json.load(f)

    if isinstance(raw, dict):
        raw = [raw]
    if not isinstance(raw, list):
        raise ValueError("Records JSON must be a list of record objects")

    records: list[RawRecord] = []
    for i, item in enumerate(raw):
        if not isinstance(item, dict):
            raise ValueError(f"Record {i} must be a JSON object")
        records.append(RawRecord.from_dict(item))
    return records


def _format_value(value) -> str:
    if value is None:
        return "no data"
    if isinstance(value, tuple):
        u, v, magnitude = value
        return f"u={u:.3f} v={v:.3f} |v|={magnitude:.3f}"
    return f"{value:.3f}"


def main(argv=None):
    parser = _build_parser()
    args = parser.parse_args(argv)

    cfg = load_config(args.config)
    if args.log_level is not None:
        cfg.logging.level = args.log_level
    cfg.logging.apply()

    if (args.lon is None) != (args.lat is None):
        parser.error("--lon and --lat must be given together")

    records = load_records_json(args.records)
    logger.debug(f"Loaded {len(records)} record(s) from {args.records}")

    catalog = default_catalog()
    grid_field = build_grid(records, recipe_for=catalog.recipe_for, config=cfg)

    description = grid_field.recipe.description if grid_field.recipe is not None else "uncataloged"
    print(f"source: {grid_field.source}")
    print(f"date:   {grid_field.date.isoformat()}")
    print(f"recipe: {grid_field.recipe_key} ({description})")

    if args.summary:
        missing = 0

        def _count(lon, lat, sample):
            nonlocal missing
            if sample is None:
                missing += 1

        grid_field.for_each_point(_count)
        grid = grid_field.grid
        print(f"grid:   {grid.ny} rows x {grid.cols} cols (continuous={grid.is_continuous}), {missing} missing")

    if args.lon is not None:
        value = grid_field.interpolate(args.lon, args.lat)
        print(f"value @ ({args.lon}, {args.lat}): {_format_value(value)}")


if __name__ == "__main__":
    main()

"""
Gear Cutout command-line tool.

Removes the background from gear images, renders a full-frame cutout and a
tight thumbnail for each, optionally names them with the naming service,
and writes ``{name}.png`` / ``{name}_サムネ.png`` to the output directory.

Example:
    gear-cutout shots/ -o out/ --tolerance 60 --erosion 1 --outline
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from GC_Libs.constants import (
    DEFAULT_CORNER_FRACTION,
    DEFAULT_EROSION_ITERATIONS,
    DEFAULT_FULL_SIZE,
    DEFAULT_TIGHT_SIZE,
    DEFAULT_TOLERANCE,
    MAX_EROSION_ITERATIONS,
    MAX_TOLERANCE,
    MIN_TOLERANCE,
    SUPPORTED_STANDARD_IMAGES,
)
from GC_Libs.CatalogLib.batch_runner import export_items, name_items, process_items
from GC_Libs.CatalogLib.item_store import ItemStore
from GC_Libs.CatalogLib.naming_service import NamingService
from GC_Libs.CatalogLib.session_store import load_session, save_session
from GC_Libs.CatalogLib.settings_store import load_api_key, save_api_key
from GC_Libs.CutoutLib.cutout_models import (
    ClassificationMode,
    CornerRegion,
    CutoutError,
    ProcessingParameters,
    RetentionMode,
)

logger = logging.getLogger("gear_cutout")

DEFAULT_SETTINGS_DIR = Path.home() / ".gear_cutout"


def clamp(value: int, lower: int, upper: int) -> int:
    return max(lower, min(upper, value))


def collect_inputs(paths: Sequence[Path]) -> List[Path]:
    """Expand directories into their supported image files (sorted)."""
    files: List[Path] = []
    for path in paths:
        if path.is_dir():
            files.extend(
                sorted(p for p in path.iterdir()
                       if p.is_file() and p.suffix.lower() in SUPPORTED_STANDARD_IMAGES)
            )
        else:
            files.append(path)
    return files


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gear-cutout",
        description="Remove uniform backgrounds from gear images and export catalog sprites.",
    )
    parser.add_argument("inputs", nargs="*", type=Path, help="Image files or directories")
    parser.add_argument("-o", "--output-dir", type=Path, default=Path("out"), help="Output directory")
    parser.add_argument("--tolerance", type=int, default=DEFAULT_TOLERANCE,
                        help=f"Background color distance ({MIN_TOLERANCE}-{MAX_TOLERANCE})")
    parser.add_argument("--erosion", type=int, default=DEFAULT_EROSION_ITERATIONS,
                        help=f"Edge erosion iterations (0-{MAX_EROSION_ITERATIONS})")
    parser.add_argument("--outline", action="store_true", help="Draw a black outline stroke")
    parser.add_argument("--mode", choices=[m.value for m in ClassificationMode],
                        default=ClassificationMode.SEEDED_FILL.value, help="Background classification policy")
    parser.add_argument("--retention", choices=[m.value for m in RetentionMode],
                        default=RetentionMode.UNION_ABOVE_SIZE.value, help="Component retention policy")
    parser.add_argument("--no-corner-mask", action="store_true",
                        help="Do not clear the bottom-right corner region")
    parser.add_argument("--corner-fraction", type=float, default=DEFAULT_CORNER_FRACTION,
                        help="Size of the cleared bottom-right region as a fraction of width/height")
    parser.add_argument("--full-size", type=int, default=DEFAULT_FULL_SIZE, help="Full output side in pixels")
    parser.add_argument("--tight-size", type=int, default=DEFAULT_TIGHT_SIZE, help="Thumbnail side in pixels")
    parser.add_argument("--workers", type=int, default=None, help="Parallel workers (default: auto)")
    parser.add_argument("--api-key", default=None, help="Naming service API key")
    parser.add_argument("--save-api-key", action="store_true", help="Persist --api-key for later runs")
    parser.add_argument("--settings-dir", type=Path, default=DEFAULT_SETTINGS_DIR,
                        help="Directory holding settings.json")
    parser.add_argument("--session", type=Path, default=None,
                        help="Session file to load per-item settings from and save them to")
    parser.add_argument("--overwrite", action="store_true", help="Replace existing output files")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def build_parameters(args: argparse.Namespace) -> ProcessingParameters:
    corner = None if args.no_corner_mask else CornerRegion(args.corner_fraction, args.corner_fraction)
    return ProcessingParameters(
        tolerance=clamp(args.tolerance, MIN_TOLERANCE, MAX_TOLERANCE),
        erosion_iterations=clamp(args.erosion, 0, MAX_EROSION_ITERATIONS),
        outline=args.outline,
        classification_mode=args.mode,
        retention_mode=args.retention,
        corner_region=corner,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    api_key = (args.api_key or "").strip()
    if args.save_api_key:
        if not api_key:
            parser.error("--save-api-key requires --api-key")
        save_api_key(args.settings_dir, api_key)
        logger.info("Saved API key to %s", args.settings_dir)
    if not api_key:
        api_key = load_api_key(args.settings_dir)

    try:
        params = build_parameters(args)
    except CutoutError as e:
        parser.error(str(e))

    if args.session and args.session.exists():
        store = load_session(args.session, params)
        logger.info("Loaded %d item(s) from %s", len(store), args.session)
    else:
        store = ItemStore()

    known = {Path(item.source_path).resolve() for item in store.items()}
    for path in collect_inputs(args.inputs):
        resolved = Path(path).resolve()
        if resolved in known:
            logger.info("Already in session, keeping stored settings: %s", path)
            continue
        known.add(resolved)
        store.add(path, params=params)

    if len(store) == 0:
        parser.error("no input images")

    try:
        process_items(store, full_size=args.full_size, tight_size=args.tight_size,
                      max_workers=args.workers)
    except CutoutError as e:
        parser.error(str(e))

    if api_key:
        name_items(store, NamingService(api_key))
    else:
        logger.info("No API key configured; keeping default names")

    try:
        export_items(store, args.output_dir, overwrite=args.overwrite)
    except ValueError as e:
        logger.error("%s", e)
        return 1

    if args.session:
        save_session(args.session, store)

    failed = [item for item in store.items() if item.failed]
    for item in failed:
        logger.error("Failed: %s (%s)", item.source_path, item.error)
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())

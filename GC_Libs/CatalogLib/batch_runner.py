"""
Batch processing of catalog items.

Images are processed in parallel across items, one cutout run per worker;
a single image's pixel passes are never split. A file that cannot be decoded
marks only its own item as failed and the rest of the batch continues.

Functions:
    run_item: Run the cutout pipeline for one item and publish the result
    process_items: Run many items, optionally on a thread pool
    reprocess_item: Apply a parameter edit and rerun the item
    name_items: Ask the naming service to name every processed item
    export_items: Write full outputs and thumbnails to a directory
"""

import concurrent.futures
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from GC_Libs.constants import DEFAULT_FULL_SIZE, DEFAULT_TIGHT_SIZE
from GC_Libs.CatalogLib.filename_builder import output_filenames
from GC_Libs.CatalogLib.item_store import ItemStore
from GC_Libs.CatalogLib.naming_service import NamingService
from GC_Libs.CutoutLib.cutout_models import CutoutError, InvalidParameterError, encode_png
from GC_Libs.CutoutLib.cutout_pipeline import load_image, run_cutout, validate_parameters

logger = logging.getLogger(__name__)


def run_item(
    store: ItemStore,
    item_id: str,
    full_size: int = DEFAULT_FULL_SIZE,
    tight_size: int = DEFAULT_TIGHT_SIZE,
) -> bool:
    """
    Process one item with the parameters current when the run starts.

    Returns:
        True if outputs were published. False if the run failed or its
        parameters went stale before it finished.

    Raises:
        InvalidParameterError: If the output sizes are invalid
    """
    source_path, params, version = store.snapshot(item_id)

    try:
        image = load_image(source_path)
        outputs = run_cutout(image, params, full_size, tight_size)
    except InvalidParameterError:
        raise
    except CutoutError as e:
        logger.warning("Skipping %s: %s", source_path, e)
        store.mark_failed(item_id, version, str(e))
        return False

    return store.publish_outputs(item_id, version, outputs)


def process_items(
    store: ItemStore,
    item_ids: Optional[Iterable[str]] = None,
    full_size: int = DEFAULT_FULL_SIZE,
    tight_size: int = DEFAULT_TIGHT_SIZE,
    use_threading: bool = True,
    max_workers: Optional[int] = None,
) -> Dict[str, bool]:
    """
    Process items, one worker per image.

    Args:
        store: Item store holding the items
        item_ids: Items to process (default: every item in the store)
        full_size: Side of the full-frame outputs
        tight_size: Side of the tight thumbnails
        use_threading: Run items on a ThreadPoolExecutor (default: True)
        max_workers: Maximum number of threads (default: None = executor default)

    Returns:
        Dictionary mapping item_id -> True if outputs were published

    Raises:
        InvalidParameterError: If the output sizes are invalid
    """
    ids = list(item_ids) if item_ids is not None else [item.item_id for item in store.items()]
    if full_size <= 0 or tight_size <= 0:
        raise InvalidParameterError(
            f"output sizes must be > 0, got full={full_size}, tight={tight_size}"
        )

    results: Dict[str, bool] = {}
    logger.info("Processing %d item(s)", len(ids))

    if use_threading and len(ids) > 1:
        with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures: Dict[concurrent.futures.Future, str] = {}
            for item_id in ids:
                future = executor.submit(run_item, store, item_id, full_size, tight_size)
                futures[future] = item_id

            for future in concurrent.futures.as_completed(futures):
                results[futures[future]] = future.result()
    else:
        for item_id in ids:
            results[item_id] = run_item(store, item_id, full_size, tight_size)

    done = sum(1 for ok in results.values() if ok)
    logger.info("Processed %d/%d item(s)", done, len(ids))
    return results


def reprocess_item(
    store: ItemStore,
    item_id: str,
    full_size: int = DEFAULT_FULL_SIZE,
    tight_size: int = DEFAULT_TIGHT_SIZE,
    **changes: Any,
) -> bool:
    """
    Apply a parameter edit and rerun the item from its source image.

    Raises:
        KeyError: If no item has this id
        InvalidParameterError: If the edited parameters or sizes are invalid
    """
    store.update_parameters(item_id, **changes)
    validate_parameters(store.get(item_id).params, full_size, tight_size)
    return run_item(store, item_id, full_size, tight_size)


def name_items(
    store: ItemStore,
    service: NamingService,
    item_ids: Optional[Iterable[str]] = None,
) -> int:
    """
    Name every processed item from its tight output.

    Items without outputs are skipped. Naming failures fall back to the
    service's placeholder name.

    Returns:
        Number of items named successfully
    """
    ids = set(item_ids) if item_ids is not None else None
    named = 0
    for item in store.items():
        if ids is not None and item.item_id not in ids:
            continue
        if not item.ready:
            continue

        result = service.suggest_name(encode_png(item.outputs.tight), item.category_id)
        store.set_name(item.item_id, result.category_id, result.item_name)
        if result.succeeded:
            named += 1
        logger.info("Named %s -> %s", item.source_path.name, result.name)
    return named


def export_items(store: ItemStore, output_dir: Path, overwrite: bool = False) -> List[Path]:
    """
    Write ``{name}.png`` and ``{name}_サムネ.png`` for every processed item.

    Items that share a name in one export get ``_1``, ``_2``... appended.
    Every target is checked before the first write, so a refused export
    leaves the directory untouched.

    Args:
        store: Item store holding the items
        output_dir: Destination directory (created if missing)
        overwrite: Replace existing files (default: False)

    Returns:
        Paths written, in item order

    Raises:
        ValueError: If a file exists and overwrite=False
        OSError: If a file cannot be written
    """
    output_dir = Path(output_dir)

    targets: List[Tuple[Path, Any]] = []
    used_names: Set[str] = set()
    for item in store.items():
        if not item.ready:
            continue

        name = item.name
        counter = 1
        while name in used_names:
            name = f"{item.name}_{counter}"
            counter += 1
        used_names.add(name)

        full_name, thumb_name = output_filenames(name)
        targets.append((output_dir / full_name, item.outputs.full))
        targets.append((output_dir / thumb_name, item.outputs.tight))

    if not overwrite:
        existing = [path for path, _ in targets if path.exists()]
        if existing:
            raise ValueError(
                f"Output file already exists: {existing[0]}. "
                f"Set overwrite=True to replace."
            )

    output_dir.mkdir(parents=True, exist_ok=True)
    written: List[Path] = []
    for path, image in targets:
        path.write_bytes(encode_png(image))
        written.append(path)

    logger.info("Exported %d file(s) to %s", len(written), output_dir)
    return written

import argparse
import logging
import sys
from pathlib import Path
from typing import Iterator, List, Set

from .. import config
from ..errors import ArtQueError
from ..models.pipeline_parameters import PipelineOptions
from ..pipeline.sticker_postprocessor import process_image_buffer
from ..repositories.image_repository import ImageRepository
from ..services.compositing_service import CompositingService

logger = logging.getLogger(__name__)


def iter_images(folder: Path, exts=None) -> Iterator[Path]:
    """Yield image paths in a stable (sorted) order."""
    allowed = {e.lower().lstrip(".") for e in (exts or config.ALLOWED_EXTENSIONS)}
    for p in sorted(folder.iterdir()):
        if not p.is_file():
            continue
        if p.suffix.lower().lstrip(".") not in allowed:
            logger.debug(f"Skipping due to extension: {p}")
            continue
        yield p


def output_name(path: Path, taken: Set[str]) -> str:
    """
    `<stem>.png`, or `<stem>_<ext>.png` when another input with the same stem
    already claimed that name in this run (e.g. a.png and a.jpg).
    """
    name = f"{path.stem}.png"
    if name in taken:
        name = f"{path.stem}_{path.suffix.lower().lstrip('.')}.png"
        logger.warning(f"[{path.name}] Output name collides with another input, writing {name}")
    taken.add(name)
    return name


def process_file(path: Path, out_dir: Path, args: argparse.Namespace,
                 name: str = None,
                 image_repository: ImageRepository = ImageRepository(),
                 compositing_service: CompositingService = CompositingService()) -> Path:
    target = out_dir / (name or f"{path.stem}.png")
    data = path.read_bytes()

    if args.white_bg:
        image = image_repository.decode(data)
        flattened = compositing_service.flatten_onto_white(image, args.canvas_size)
        return image_repository.save(flattened, target)

    options = PipelineOptions(
        skip_background_removal=not args.remove_background,
        use_advanced_processing=not args.simple,
    )
    result = process_image_buffer(data, options)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(result.png)
    return target


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="art-que-postprocess",
        description="Turn a folder of artwork into bordered, centred sticker PNGs.",
    )
    parser.add_argument("input_dir", type=Path)
    parser.add_argument("output_dir", type=Path)
    parser.add_argument("--remove-background", action="store_true",
                        help="call FAL background removal before processing (needs FAL_KEY)")
    parser.add_argument("--simple", action="store_true",
                        help="only shrink to fit 2048x2048, no masking / centering / border")
    parser.add_argument("--white-bg", action="store_true",
                        help="flatten onto a white square canvas instead of building a sticker")
    parser.add_argument("--canvas-size", type=int, default=1024,
                        help="canvas size for --white-bg (default: 1024)")
    return parser


def main(argv: List[str] = None) -> int:
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format=config.LOG_FORMAT,
        datefmt=config.LOG_DATEFMT,
    )
    args = build_parser().parse_args(argv)

    if not args.input_dir.is_dir():
        logger.error(f"Not a directory: {args.input_dir}")
        return 2

    processed, failed = 0, 0
    taken: Set[str] = set()
    for path in iter_images(args.input_dir):
        try:
            out = process_file(path, args.output_dir, args, output_name(path, taken))
        except (ArtQueError, OSError) as err:
            failed += 1
            logger.error(f"[{path.name}] Error: {err}")
            continue
        processed += 1
        logger.info(f"[{path.name}] → {out}")

    logger.info(f"Done: {processed} processed, {failed} failed")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())

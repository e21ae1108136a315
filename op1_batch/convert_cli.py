#!/usr/bin/env python3
"""Convert gigantic JSON exports to the compact index/recipe format with constant RAM."""

import argparse, logging, pathlib, sys
from typing import List, Optional

from recipe_core.config import configure_logging, get_settings
from recipe_core.errors import MalformedRootError, OutputIOError, ParseError
from recipe_core.models import ConversionResult
from recipe_core.pipeline import convert_file
from recipe_core.streaming_converter import StreamingConverter

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_OUTPUT_ERROR = 1
EXIT_INPUT_ERROR = 2


def default_output_path(path: pathlib.Path) -> pathlib.Path:
    return path.with_name(path.name + ".out.json")


def process(path: pathlib.Path, output: pathlib.Path, progress_every: int) -> ConversionResult:
    converter = StreamingConverter(progress_every=progress_every)
    result = convert_file(path, output, converter=converter)
    stats = result.stats
    logger.info("%s: %s root, %s elements, %s index entries, recipe string %s",
                path, stats.root_shape.value, stats.elements, len(result.index),
                "found" if result.data else "absent")
    return result


def cli(argv: Optional[List[str]] = None) -> int:
    settings = get_settings()
    ap = argparse.ArgumentParser(description="Convert a JSON export into {index, data} form.")
    ap.add_argument("file", type=pathlib.Path)
    ap.add_argument("-o", "--output", type=pathlib.Path, help="destination (default: FILE.out.json)")
    ap.add_argument("--progress-every", type=int, default=settings.progress_every,
                    help="log progress every N top-level elements (0 disables)")
    ap.add_argument("--log-level", default=settings.log_level)
    args = ap.parse_args(argv)

    configure_logging(args.log_level)
    output = args.output or default_output_path(args.file)
    try:
        process(args.file, output, args.progress_every)
    except (MalformedRootError, ParseError) as e:
        logger.error("Conversion failed: %s", e)
        return EXIT_INPUT_ERROR
    except OutputIOError as e:
        logger.error("Conversion failed: %s", e)
        return EXIT_OUTPUT_ERROR
    except OSError as e:
        logger.error("Cannot read %s: %s", args.file, e)
        return EXIT_INPUT_ERROR
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(cli())

#!/usr/bin/env python3
"""End-to-end conversion: probe the root, stream the document, write the result."""
import logging, pathlib
from typing import BinaryIO, Optional

from recipe_core.models import ConversionResult
from recipe_core.output_assembler import write_output
from recipe_core.root_prober import detect_root_shape, prepare_stream
from recipe_core.streaming_converter import StreamingConverter

logger = logging.getLogger(__name__)


def convert_stream(stream: BinaryIO, destination, converter: Optional[StreamingConverter] = None) -> ConversionResult:
    """Convert an already-open binary stream and write the result to ``destination``."""
    converter = converter or StreamingConverter()
    shape, stream = prepare_stream(stream)
    result = converter.convert(stream, shape)
    write_output(result, destination)
    return result


def convert_file(input_path, output_path, converter: Optional[StreamingConverter] = None) -> ConversionResult:
    """Convert the JSON file at ``input_path`` into ``output_path``.

    The root is probed with its own short-lived reader and the document is
    then reopened for the main pass.
    """
    input_path = pathlib.Path(input_path)
    converter = converter or StreamingConverter()
    shape = detect_root_shape(input_path)
    logger.info("converting %s (%s root) -> %s", input_path, shape.value, output_path)
    with open(input_path, "rb") as f:
        result = converter.convert(f, shape)
    write_output(result, output_path)
    return result

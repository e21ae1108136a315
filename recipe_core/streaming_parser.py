#!/usr/bin/env python3
"""Constant‑memory traversal of a JSON document's top-level members."""
import ijson, logging
from typing import Any, BinaryIO, Iterator, Tuple

from recipe_core.errors import ParseError
from recipe_core.models import RootShape

logger = logging.getLogger(__name__)

DEFAULT_BUF_SIZE = 64 * 1024


class StreamingJSONParser:
    def __init__(self, buf_size: int = DEFAULT_BUF_SIZE):
        self.buf_size = buf_size

    def iter_pairs(self, stream: BinaryIO, shape: RootShape) -> Iterator[Tuple[Any, Any]]:
        """Yield ``(key, value)`` for each top-level member, in document order.

        Object members yield their field name; array elements yield their
        position. The stream is read to the end, so trailing garbage after the
        root value is reported like any other syntax error.
        """
        try:
            if shape is RootShape.OBJECT:
                yield from ijson.kvitems(stream, '', buf_size=self.buf_size, use_float=True)
            else:
                items = ijson.items(stream, 'item', buf_size=self.buf_size, use_float=True)
                yield from enumerate(items)
        except (ijson.JSONError, UnicodeDecodeError) as e:
            logger.error(f"stream parse failed: {e}")
            raise ParseError(f"JSON parsing failed (check file format): {e}") from e

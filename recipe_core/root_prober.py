#!/usr/bin/env python3
"""Detect whether a JSON document is rooted at an object or an array."""
import logging
from typing import BinaryIO, Tuple

from recipe_core.errors import MalformedRootError
from recipe_core.models import RootShape

logger = logging.getLogger(__name__)

JSON_WHITESPACE = b" \t\r\n"

_SHAPES = {b"{": RootShape.OBJECT, b"[": RootShape.ARRAY}


class PrefixedReader:
    """Binary reader that serves ``prefix`` before reading on from ``stream``."""

    def __init__(self, prefix: bytes, stream: BinaryIO):
        self._prefix = prefix
        self._stream = stream

    def read(self, size: int = -1) -> bytes:
        if not self._prefix:
            return self._stream.read(size)
        if size is None or size < 0:
            data, self._prefix = self._prefix + self._stream.read(), b""
            return data
        data, self._prefix = self._prefix[:size], self._prefix[size:]
        return data


def _scan(stream: BinaryIO) -> Tuple[RootShape, bytes]:
    consumed = bytearray()
    while True:
        ch = stream.read(1)
        if not ch:
            raise MalformedRootError("File is empty; expected a JSON object or array at the root.")
        consumed += ch
        if ch in JSON_WHITESPACE:
            continue
        shape = _SHAPES.get(ch)
        if shape is None:
            raise MalformedRootError(
                f"File does not appear to be a JSON object or array at the root "
                f"(first token starts with {ch!r})."
            )
        return shape, bytes(consumed)


def probe_root(stream: BinaryIO) -> RootShape:
    """Return the root shape, reading only up to the first structural byte."""
    shape, _ = _scan(stream)
    return shape


def detect_root_shape(path) -> RootShape:
    """Probe the file at ``path`` with a short-lived reader."""
    with open(path, "rb") as f:
        shape = probe_root(f)
    logger.debug("root of %s is %s", path, shape.value)
    return shape


def prepare_stream(stream: BinaryIO) -> Tuple[RootShape, BinaryIO]:
    """Probe ``stream`` and hand back a reader positioned at its start.

    Seekable streams are rewound; anything else is wrapped so the probed
    prefix is replayed ahead of the remaining bytes.
    """
    seekable = getattr(stream, "seekable", None)
    if seekable is not None and seekable():
        start = stream.tell()
        shape = probe_root(stream)
        stream.seek(start)
        return shape, stream
    shape, prefix = _scan(stream)
    return shape, PrefixedReader(prefix, stream)

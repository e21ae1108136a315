#!/usr/bin/env python3
"""Compact serialization and atomic write of a conversion result."""
import json, logging, math, os, pathlib, re, tempfile
from decimal import Decimal

from recipe_core.errors import OutputIOError
from recipe_core.models import MAX_SAFE_INTEGER, ConversionResult

logger = logging.getLogger(__name__)

LONE_SURROGATE = re.compile(r"[\ud800-\udfff]")


def format_number(value) -> str:
    """Render a cost the way JavaScript's ``Number.prototype.toString`` does.

    ``json.dumps`` uses ``repr`` for floats, which switches to exponent form
    at different thresholds (``1e-05``, ``1e+16``). The shortest round-trip
    digits are the same in both languages, only the layout differs.
    """
    if isinstance(value, bool):
        raise TypeError(f"cost must be a number, not {value!r}")
    if isinstance(value, int) and abs(value) <= MAX_SAFE_INTEGER:
        return str(value)
    value = float(value)
    if not math.isfinite(value):
        raise ValueError(f"cost is not a finite number: {value!r}")
    if value == 0:
        return "0"
    if value < 0:
        return "-" + format_number(-value)

    _, digits, exponent = Decimal(repr(value)).normalize().as_tuple()
    s = "".join(map(str, digits))
    k = len(s)
    n = exponent + k  # value == 0.<s> * 10**n
    if k <= n <= 21:
        return s + "0" * (n - k)
    if 0 < n <= 21:
        return f"{s[:n]}.{s[n:]}"
    if -6 < n <= 0:
        return "0." + "0" * -n + s
    mantissa = s if k == 1 else f"{s[0]}.{s[1:]}"
    return f"{mantissa}e{'+' if n > 0 else '-'}{abs(n - 1)}"


def _string(value: str) -> str:
    text = json.dumps(value, ensure_ascii=False)
    # unpaired surrogates cannot be encoded as UTF-8
    return LONE_SURROGATE.sub(lambda m: "\\u%04x" % ord(m.group()), text)


def serialize(result: ConversionResult) -> bytes:
    """Return ``{"index":...,"data":...}`` as UTF-8 JSON with no whitespace."""
    try:
        entries = ",".join(
            f"{_string(key)}:[{_string(entry.icon)},{_string(entry.name)},{format_number(entry.cost)}]"
            for key, entry in result.index.items()
        )
        text = f'{{"index":{{{entries}}},"data":{_string(result.data)}}}'
        return text.encode("utf-8")
    except (TypeError, ValueError) as e:
        raise OutputIOError(f"Could not serialize output: {e}") from e


def _discard(path: str) -> None:
    try:
        os.unlink(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning(f"could not remove temporary output {path}: {e}")


def write_output(result: ConversionResult, destination) -> pathlib.Path:
    """Write ``result`` to ``destination`` via a temp file in the same directory.

    The destination only ever holds a complete document: on any failure the
    temporary file is removed and the destination is left as it was.
    """
    destination = pathlib.Path(destination)
    payload = serialize(result)
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=destination.parent, prefix=f".{destination.name}.", suffix=".tmp")
    except OSError as e:
        logger.error(f"cannot prepare output for {destination}: {e}")
        raise OutputIOError(f"Cannot prepare output location {destination}: {e}") from e

    try:
        with os.fdopen(fd, "wb") as f:
            f.write(payload)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, destination)
    except OSError as e:
        _discard(tmp_path)
        logger.error(f"write to {destination} failed: {e}")
        raise OutputIOError(f"Writing output to {destination} failed: {e}") from e
    except BaseException:
        _discard(tmp_path)
        raise

    logger.info("wrote %s bytes to %s", len(payload), destination)
    return destination

#!/usr/bin/env python3
"""Single-pass conversion of a streamed JSON document into an index and recipe string."""
import logging, time
from typing import BinaryIO, Optional

from recipe_core import key_codec
from recipe_core.models import ConversionResult, ConversionStats, RootShape
from recipe_core.shape_classifier import RULES_BY_SHAPE, IndexMatch, RecipeMatch, RowMatch, classify
from recipe_core.streaming_parser import StreamingJSONParser

logger = logging.getLogger(__name__)


class StreamingConverter:
    """Fold the top-level members of a document into a :class:`ConversionResult`.

    The converter itself holds configuration only. Every call to
    :meth:`convert` starts from an empty index, an empty recipe string and a
    key counter of zero, so one instance can serve concurrent conversions.
    """

    def __init__(self, parser: Optional[StreamingJSONParser] = None, progress_every: int = 100000):
        self.parser = parser or StreamingJSONParser()
        self.progress_every = progress_every

    def convert(self, stream: BinaryIO, shape: RootShape) -> ConversionResult:
        start = time.time()
        rules = RULES_BY_SHAPE[shape]
        index = {}
        data = ""
        counter = 0
        stats = ConversionStats(root_shape=shape)

        for key, value in self.parser.iter_pairs(stream, shape):
            stats.elements += 1
            match = classify(key, value, rules)
            if isinstance(match, RecipeMatch):
                data = match.data
                stats.recipe_matches += 1
            elif isinstance(match, IndexMatch):
                index[match.key] = match.entry
                stats.indexed += 1
            elif isinstance(match, RowMatch):
                index[key_codec.encode(counter)] = match.entry
                counter += 1
                stats.indexed += 1
            else:
                stats.skipped += 1
            if self.progress_every and stats.elements % self.progress_every == 0:
                logger.info("%s elements | %s indexed", stats.elements, stats.indexed)

        stats.elapsed = time.time() - start
        logger.info("Done %s elements (%s indexed, %s skipped) in %.2fs",
                    stats.elements, len(index), stats.skipped, stats.elapsed)
        return ConversionResult(index=index, data=data, stats=stats)

"""Value types shared by the conversion pipeline."""

import enum
from dataclasses import dataclass, field
from typing import Dict, NamedTuple, Optional, Union

Number = Union[int, float]

# largest integer a double represents exactly (JS Number.MAX_SAFE_INTEGER)
MAX_SAFE_INTEGER = 2 ** 53 - 1


class RootShape(enum.Enum):
    OBJECT = "object"
    ARRAY = "array"


class IndexEntry(NamedTuple):
    """One ``[icon, name, cost]`` record of the output index."""
    icon: str
    name: str
    cost: Number


@dataclass
class ConversionStats:
    root_shape: Optional[RootShape] = None
    elements: int = 0
    indexed: int = 0
    skipped: int = 0
    recipe_matches: int = 0
    elapsed: float = 0.0


@dataclass
class ConversionResult:
    index: Dict[str, IndexEntry] = field(default_factory=dict)
    data: str = ""
    stats: ConversionStats = field(default_factory=ConversionStats)

    def payload(self) -> Dict[str, object]:
        """Return the serializable ``{"index": ..., "data": ...}`` document."""
        return {"index": {k: list(v) for k, v in self.index.items()}, "data": self.data}

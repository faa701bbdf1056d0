from __future__ import annotations
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from blockstage_core.constants import PLACEHOLDER

class BlockCategory(Enum):
    MOTION = "Motion"
    LOOKS = "Looks"
    EVENT = "Event"
    CONTROL = "Control"


@dataclass(frozen=True)
class BlockTemplate:
    """Catalog entry describing a kind of instruction."""
    key: str
    text: str
    input_types: Tuple[str, ...]
    category: BlockCategory
    color: str

    @property
    def input_count(self) -> int:
        return self.text.count(PLACEHOLDER)


@dataclass
class BlockInstance:
    """
    A block placed in a sprite's program.

    `inputs` maps the 0-based placeholder index to the raw string typed by the user
    (or written by the engine). `children` holds the body of a compound block; the
    editing UI only produces flat programs, so it is usually empty.
    """
    id: str
    text: str
    input_types: List[str]
    category: BlockCategory
    color: str
    inputs: Dict[int, str] = field(default_factory=dict)
    children: List['BlockInstance'] = field(default_factory=list)

    def is_event(self) -> bool:
        return self.category is BlockCategory.EVENT

    def matches(self, category: BlockCategory, fragment: str) -> bool:
        return self.category is category and fragment in self.text

    def raw_input(self, index: int) -> Optional[str]:
        value = self.inputs.get(index)
        if value is None or value == "":
            return None
        return str(value)

    def number_input(self, index: int, default: float) -> float:
        """Numeric value of an input, or `default` when absent or unparsable."""
        return parse_number(self.raw_input(index), default)

    def text_input(self, index: int, default: str) -> str:
        value = self.raw_input(index)
        return value if value is not None else default

    def walk(self):
        """Yield this block and its descendants depth-first."""
        yield self
        for child in list(self.children):
            yield from child.walk()

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "text": self.text,
            "inputTypes": list(self.input_types),
            "category": self.category.value,
            "color": self.color,
            "inputs": {str(k): v for k, v in self.inputs.items()},
        }
        if self.children:
            data["children"] = [child.to_dict() for child in self.children]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BlockInstance':
        return cls(
            id=str(data["id"]),
            text=data["text"],
            input_types=list(data.get("inputTypes", [])),
            category=BlockCategory(data["category"]),
            color=data.get("color", ""),
            inputs={int(k): str(v) for k, v in (data.get("inputs") or {}).items()},
            children=[cls.from_dict(child) for child in data.get("children", [])],
        )


def parse_number(value: Optional[str], default: float) -> float:
    """Parse a block input as a float; missing, unparsable and non-finite values give `default`."""
    if value is None:
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number):
        return default
    return number

def format_number(value: float) -> str:
    """Render a number the way it is stored in a block input (20.0 -> "20")."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)

def sanitize_number_input(value: str) -> str:
    """Keep digits and the first decimal point only ("1a.2.3" -> "1.23")."""
    kept = "".join(ch for ch in value if ch.isdigit() or ch == ".")
    if kept.count(".") > 1:
        head, _, tail = kept.partition(".")
        kept = head + "." + tail.replace(".", "")
    return kept

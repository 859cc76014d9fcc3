"""Signature metadata and schema node types.

``TensorInfo`` and ``Signature`` describe what a model exposes; they are
read-only snapshots produced by a ``SignatureSource``. The ``SchemaNode``
classes are what the deriver produces; each renders to the JSON shape used
in the ``definitions`` section of the document.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Tuple

# Dimension size meaning "determined at call time".
DYNAMIC_DIM = None

DEFAULT_SERVING_SIGNATURE = "serving_default"


@dataclass(frozen=True)
class TensorInfo:
    """Element type and declared shape of one named tensor."""

    dtype: str
    shape: Tuple[Optional[int], ...] = ()

    @classmethod
    def from_dims(cls, dtype: str, dims: Optional[Iterable[Optional[int]]]) -> "TensorInfo":
        """Build from serialized dims where ``-1`` or ``None`` marks a dynamic size."""
        shape = []
        for dim in dims or ():
            if dim is None or int(dim) < 0:
                shape.append(DYNAMIC_DIM)
            else:
                shape.append(int(dim))
        return cls(dtype=str(dtype), shape=tuple(shape))

    @property
    def rank(self) -> int:
        return len(self.shape)

    def to_dict(self) -> Dict[str, Any]:
        return {"dtype": self.dtype, "shape": list(self.shape)}


@dataclass(frozen=True)
class Signature:
    """One callable model entry point with ordered inputs and outputs."""

    name: str
    inputs: Dict[str, TensorInfo] = field(default_factory=dict)
    outputs: Dict[str, TensorInfo] = field(default_factory=dict)
    method_name: str = ""


class PrimitiveType(str, Enum):
    """Schema primitive a tensor element type maps to."""

    INTEGER = "integer"
    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"


class SchemaNode:
    """Base class of derived schema nodes."""

    def to_dict(self) -> Dict[str, Any]:
        raise NotImplementedError


@dataclass
class PrimitiveSchema(SchemaNode):
    """Scalar schema; ``format``/``example`` are omitted when ``None``."""

    type: PrimitiveType
    format: Optional[str] = None
    example: Any = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"type": PrimitiveType(self.type).value}
        if self.format is not None:
            result["format"] = self.format
        if self.example is not None:
            result["example"] = self.example
        return result


@dataclass
class ArraySchema(SchemaNode):
    items: SchemaNode
    properties: Optional[Dict[str, SchemaNode]] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"type": "array", "items": self.items.to_dict()}
        if self.properties is not None:
            result["properties"] = {name: node.to_dict() for name, node in self.properties.items()}
        return result


@dataclass
class ObjectSchema(SchemaNode):
    """Object schema.

    Tensor leaves use ``items`` and ``example`` to describe the innermost
    values; request envelopes only use ``properties``.
    """

    properties: Optional[Dict[str, SchemaNode]] = None
    items: Optional[SchemaNode] = None
    example: Optional[list] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"type": "object"}
        if self.items is not None:
            result["items"] = self.items.to_dict()
        if self.example is not None:
            result["example"] = list(self.example)
        if self.properties is not None:
            result["properties"] = {name: node.to_dict() for name, node in self.properties.items()}
        return result

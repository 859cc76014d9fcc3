"""Tensor element type classification.

Maps element type names (``float32``, ``int64``, ``string``, ``bool``, ...)
to a Swagger primitive ``type``/``format`` pair.

Rules are checked in order and the first match wins. Order matters because
the patterns overlap: ``int32`` also contains ``int``, so the sized integer
rules must come before the generic one.
"""

from typing import Callable, NamedTuple, Tuple

from .errors import UnsupportedDTypeError
from .types import PrimitiveType

# Reference: https://swagger.io/docs/specification/data-models/data-types/


class DTypeMapping(NamedTuple):
    type: PrimitiveType
    format: str


def _contains(token: str) -> Callable[[str], bool]:
    return lambda name: token in name


DTYPE_RULES: Tuple[Tuple[Callable[[str], bool], DTypeMapping], ...] = (
    (_contains("int32"), DTypeMapping(PrimitiveType.INTEGER, "int32")),
    (_contains("int64"), DTypeMapping(PrimitiveType.INTEGER, "int64")),
    (_contains("int"), DTypeMapping(PrimitiveType.INTEGER, "")),
    (_contains("float"), DTypeMapping(PrimitiveType.NUMBER, "float")),
    (_contains("complex"), DTypeMapping(PrimitiveType.NUMBER, "")),
    (_contains("string"), DTypeMapping(PrimitiveType.STRING, "")),
    (_contains("bool"), DTypeMapping(PrimitiveType.BOOLEAN, "")),
)


def classify(dtype_name: str) -> DTypeMapping:
    """Classify an element type name.

    Raises ``UnsupportedDTypeError`` when no rule matches.
    """
    name = str(dtype_name).lower()
    for matches, mapping in DTYPE_RULES:
        if matches(name):
            return mapping
    raise UnsupportedDTypeError(dtype_name)

"""Schema derivation for tensors and signatures.

A tensor becomes a leaf object whose ``items`` is the element primitive and
whose ``example`` repeats one canonical value once per element of the
innermost dimension. Every remaining dimension adds one ``array`` level,
except a dynamic leading dimension: that one is the batch axis and is
already represented by the request's ``instances`` array.

Example: ``float32[None, 784]`` derives to a single leaf with a 784-long
example; ``int32[2, 3, 4]`` derives to ``array(array(leaf))`` with a
4-long example.
"""

from typing import Any, Dict

from .dtypes import classify
from .errors import SchemaError
from .types import (
    DYNAMIC_DIM,
    ArraySchema,
    ObjectSchema,
    PrimitiveSchema,
    PrimitiveType,
    SchemaNode,
    Signature,
    TensorInfo,
)

_EXAMPLES = {
    PrimitiveType.INTEGER: 0.0,
    PrimitiveType.NUMBER: 0.0,
    PrimitiveType.STRING: "ABC",
    PrimitiveType.BOOLEAN: True,
}


def example_for(primitive_type: PrimitiveType) -> Any:
    """Canonical example value for a schema primitive."""
    try:
        return _EXAMPLES[PrimitiveType(primitive_type)]
    except (KeyError, ValueError):
        raise SchemaError(f"No example value for primitive type {primitive_type!r}") from None


def b64_property() -> Dict[str, SchemaNode]:
    """The ``b64`` escape hatch every tensor schema exposes."""
    return {"b64": PrimitiveSchema(type=PrimitiveType.STRING, example="")}


def is_multi_instance(tensor: TensorInfo) -> bool:
    """True when the leading dimension is dynamic (a batch of rows)."""
    return tensor.rank > 0 and tensor.shape[0] is DYNAMIC_DIM


def example_length(tensor: TensorInfo) -> int:
    """Size of the innermost dimension, falling back to 1."""
    if tensor.rank == 0:
        return 1
    size = tensor.shape[-1]
    if size is DYNAMIC_DIM:
        return 1
    return max(1, size)


def derive_tensor_schema(tensor: TensorInfo) -> SchemaNode:
    """Derive the request schema of one input tensor."""
    mapping = classify(tensor.dtype)
    example = example_for(mapping.type)

    node: SchemaNode = ObjectSchema(
        items=PrimitiveSchema(type=mapping.type, format=mapping.format),
        example=[example] * example_length(tensor),
    )

    wraps = max(0, tensor.rank - 1)
    if is_multi_instance(tensor) and wraps > 0:
        wraps -= 1
    for _ in range(wraps):
        node = ArraySchema(items=node)

    node.properties = b64_property()
    return node


def build_signature_schema(signature: Signature) -> ObjectSchema:
    """Build the request-body schema of one signature.

    Shape: ``{instances: [{<input name>: <tensor schema>, ...}]}``.
    """
    input_defs = {
        name: derive_tensor_schema(tensor)
        for name, tensor in signature.inputs.items()
    }
    return ObjectSchema(
        properties={
            "instances": ArraySchema(
                items=ObjectSchema(properties=input_defs),
            ),
        },
    )

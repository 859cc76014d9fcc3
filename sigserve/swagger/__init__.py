"""Interface description synthesis from model signatures.

Turns signature metadata (named, typed, shaped input tensors per signature)
into a Swagger 2.0 document with one predict endpoint and one request-body
definition per signature.

Layout
- ``types``: tensor/signature metadata and schema node types
- ``dtypes``: element type classification into schema primitives
- ``schema``: per-tensor and per-signature schema derivation
- ``document``: endpoint ordering and document assembly
"""

from .document import InterfaceDocument, MissingDefaultSignatureWarning, assemble
from .dtypes import DTypeMapping, PrimitiveType, classify
from .errors import SchemaError, SwaggerError, UnsupportedDTypeError
from .schema import build_signature_schema, derive_tensor_schema, example_for, is_multi_instance
from .types import DEFAULT_SERVING_SIGNATURE, DYNAMIC_DIM, Signature, TensorInfo

__all__ = [
    "DEFAULT_SERVING_SIGNATURE",
    "DYNAMIC_DIM",
    "DTypeMapping",
    "InterfaceDocument",
    "MissingDefaultSignatureWarning",
    "PrimitiveType",
    "SchemaError",
    "Signature",
    "SwaggerError",
    "TensorInfo",
    "UnsupportedDTypeError",
    "assemble",
    "build_signature_schema",
    "classify",
    "derive_tensor_schema",
    "example_for",
    "is_multi_instance",
]

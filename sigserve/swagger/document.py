"""Swagger document assembly.

``assemble`` turns an ordered collection of signatures into one
``InterfaceDocument``: a fixed header, one ``POST /<signature>/predict/``
path per signature and one ``TypeN`` request definition per signature.

The default serving signature is listed first; several hosted serving
platforms refuse models without it, so its absence is reported as a warning.
"""

import copy
import json
import warnings
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

import structlog

from .schema import build_signature_schema
from .types import DEFAULT_SERVING_SIGNATURE, SchemaNode, Signature

logger = structlog.get_logger("swagger.document")


class MissingDefaultSignatureWarning(UserWarning):
    """The model does not expose the default serving signature."""


def swagger_header() -> Dict[str, Any]:
    return {
        "swagger": "2.0",
        "info": {
            "description": "API to TensorFlow Model.",
            "version": "1.0.0",
            "title": "TensorFlow Model",
        },
        "basePath": "/",
        "schemes": ["http"],
    }


def predict_path(signature_name: str) -> str:
    return f"/{signature_name}/predict/"


def definition_name(index: int) -> str:
    """Synthetic definition name for the 1-based ``index``."""
    return f"Type{index}"


def swagger_path(signature_name: str, type_name: str) -> Dict[str, Any]:
    """Endpoint descriptor for one signature."""
    return {
        "post": {
            "summary": f"Perform prediction over '{signature_name}'",
            "description": "",
            "consumes": ["application/json"],
            "produces": ["application/json"],
            "parameters": [
                {
                    "in": "body",
                    "name": "body",
                    "description": f"Prediction instances for '{signature_name}'",
                    "required": True,
                    "schema": {"$ref": f"#/definitions/{type_name}"},
                }
            ],
            "responses": {
                "200": {"description": "Success"},
            },
        }
    }


def order_signatures(
    signatures: Iterable[Signature],
    default_signature: str = DEFAULT_SERVING_SIGNATURE,
) -> List[Signature]:
    """Return a new list with the default signature first.

    The relative order of the other signatures is kept. When the default is
    missing the discovery order is returned unchanged and a
    ``MissingDefaultSignatureWarning`` is issued.
    """
    ordered = list(signatures)
    default = [signature for signature in ordered if signature.name == default_signature]
    if not default:
        if ordered:
            logger.warning(
                "Default signature missing",
                signature=default_signature,
                available=[signature.name for signature in ordered],
            )
            warnings.warn(
                f"Signature '{default_signature}' is missing but is required "
                "for some services like CloudML.",
                MissingDefaultSignatureWarning,
                stacklevel=3,
            )
        return ordered
    rest = [signature for signature in ordered if signature.name != default_signature]
    return default[:1] + rest


@dataclass(frozen=True)
class InterfaceDocument:
    """A synthesized Swagger document.

    ``paths`` and ``definitions`` share the same order: the N-th path's body
    parameter references ``TypeN``.
    """

    header: Dict[str, Any]
    paths: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    definitions: Dict[str, SchemaNode] = field(default_factory=dict)
    signature_names: List[str] = field(default_factory=list)

    def definition_for(self, signature_name: str) -> Optional[SchemaNode]:
        """Request-body schema for a signature, or ``None`` if unknown."""
        if signature_name not in self.signature_names:
            return None
        return self.definitions[definition_name(self.signature_names.index(signature_name) + 1)]

    def to_dict(self) -> Dict[str, Any]:
        document = copy.deepcopy(self.header)
        document["paths"] = copy.deepcopy(self.paths)
        document["definitions"] = {
            name: schema.to_dict() for name, schema in self.definitions.items()
        }
        return document

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), indent=indent)


def assemble(
    signatures: Iterable[Signature],
    default_signature: str = DEFAULT_SERVING_SIGNATURE,
) -> InterfaceDocument:
    """Assemble the interface document for ``signatures``.

    Errors from schema derivation (e.g. ``UnsupportedDTypeError``) propagate;
    no partial document is returned.
    """
    ordered = order_signatures(signatures, default_signature)

    paths: Dict[str, Dict[str, Any]] = {}
    definitions: Dict[str, SchemaNode] = {}
    for index, signature in enumerate(ordered, start=1):
        type_name = definition_name(index)
        definitions[type_name] = build_signature_schema(signature)
        paths[predict_path(signature.name)] = swagger_path(signature.name, type_name)

    logger.debug(
        "Interface document assembled",
        signatures=[signature.name for signature in ordered],
    )

    return InterfaceDocument(
        header=swagger_header(),
        paths=paths,
        definitions=definitions,
        signature_names=[signature.name for signature in ordered],
    )

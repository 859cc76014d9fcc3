"""Exceptions raised while synthesizing an interface document."""


class SwaggerError(Exception):
    """Base class for interface synthesis failures."""


class UnsupportedDTypeError(SwaggerError):
    """A tensor element type has no schema primitive mapping."""

    def __init__(self, dtype_name: str):
        self.dtype_name = dtype_name
        super().__init__(f"Failed to map dtype {dtype_name} to swagger type.")


class SchemaError(SwaggerError):
    """Internal inconsistency while building a schema node."""

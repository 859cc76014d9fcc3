"""Exceptions raised by model runtimes and request conversion."""


class RuntimeErrorBase(Exception):
    """Base class for runtime failures."""


class ModelLoadError(RuntimeErrorBase):
    """The model artifact is missing or cannot be read."""


class UnknownSignatureError(RuntimeErrorBase, KeyError):
    """The requested signature is not exposed by the model."""

    def __init__(self, signature_name: str):
        self.signature_name = signature_name
        super().__init__(signature_name)

    def __str__(self) -> str:
        return f"Signature '{self.signature_name}' not found"


class InvalidInstanceError(RuntimeErrorBase, ValueError):
    """A request instance does not match the signature's inputs."""

"""Exception hierarchy for proto2mongoose."""

from __future__ import annotations


class Proto2MongooseError(Exception):
    """Base exception for all proto2mongoose errors."""


class RequestDecodeError(Proto2MongooseError):
    """Raised when the plugin input is not a valid ``CodeGeneratorRequest``."""


class GenerationError(Proto2MongooseError, ValueError):
    """Raised when a decoded request cannot be turned into schemas.

    Examples:
        - Unsupported ``target`` parameter
        - An option extension whose declaring file imports a file missing
          from the request
    """


__all__ = ["GenerationError", "Proto2MongooseError", "RequestDecodeError"]

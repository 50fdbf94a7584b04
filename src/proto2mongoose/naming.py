"""Name derivation rules shared by the loader, renderer and dispatcher."""

from __future__ import annotations

from typing import Optional

SCHEMA_EXPORT_SUFFIX = "Schema"
_COLLECTION_PLURAL_SUFFIX = "s"


def strip_leading_dot(name: str) -> str:
    """Drop the single leading dot of a fully-qualified descriptor reference."""

    return name[1:] if name.startswith(".") else name


def default_collection_name(message_name: str) -> str:
    """Return the collection used when a message carries no override.

    The rule is deliberately naive: lower-case the name and append ``s``.
    ``Order`` becomes ``orders`` and ``Address`` becomes ``addresss``.
    """

    return message_name.lower() + _COLLECTION_PLURAL_SUFFIX


def resolve_collection_name(message_name: str, override: Optional[str]) -> str:
    """Use *override* verbatim when present, otherwise the default rule."""

    if override:
        return override
    return default_collection_name(message_name)


def schema_export_name(message_name: str) -> str:
    return message_name + SCHEMA_EXPORT_SUFFIX


def output_filename(message_name: str, suffix: str) -> str:
    """Return the generated artifact name for *message_name*."""

    return message_name.lower() + suffix


__all__ = [
    "SCHEMA_EXPORT_SUFFIX",
    "default_collection_name",
    "output_filename",
    "resolve_collection_name",
    "schema_export_name",
    "strip_leading_dot",
]

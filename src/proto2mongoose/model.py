from __future__ import annotations

"""Dataclasses representing a protobuf schema in a plugin-friendly format."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

SKIP_FILE_MARKER = "options"


class TargetFieldType(str, Enum):
    """Field types available in the generated Mongoose schema."""

    STRING = "String"
    NUMBER = "Number"
    BOOLEAN = "Boolean"
    BINARY_BUFFER = "BinaryBuffer"
    DATE = "Date"
    MIXED_OR_OPAQUE = "MixedOrOpaque"


@dataclass(frozen=True, slots=True)
class ScalarKind:
    """A built-in protobuf scalar, identified by its ``FieldDescriptorProto.Type`` code."""

    code: int


@dataclass(frozen=True, slots=True)
class MessageKind:
    """A reference to another message type by its fully-qualified name."""

    type_name: str


@dataclass(frozen=True, slots=True)
class EnumKind:
    """A reference to an enum type by its fully-qualified name."""

    type_name: str


FieldKind = ScalarKind | MessageKind | EnumKind


@dataclass(frozen=True, slots=True)
class FieldOptions:
    """Resolved Mongoose constraints attached to a field."""

    unique: bool = False
    required: bool = False
    indexed: bool = False

    def __bool__(self) -> bool:
        return self.unique or self.required or self.indexed


@dataclass(frozen=True, slots=True)
class Field:
    """Represents a message field."""

    name: str
    number: int
    kind: FieldKind
    repeated: bool = False
    options: FieldOptions = field(default_factory=FieldOptions)


@dataclass(frozen=True, slots=True)
class Message:
    """Represents a top-level message type."""

    name: str
    full_name: str
    collection_name: str
    fields: Tuple[Field, ...] = ()


@dataclass(frozen=True, slots=True)
class SchemaFile:
    """Represents a protobuf file and the messages declared at its top level."""

    name: str
    package: Optional[str] = None
    syntax: str = "proto2"
    messages: Tuple[Message, ...] = ()

    @property
    def should_skip(self) -> bool:
        """Files without messages and option declaration files produce nothing."""

        return not self.messages or SKIP_FILE_MARKER in self.name


def eligible_messages(files: List[SchemaFile]) -> List[Tuple[SchemaFile, Message]]:
    """Return the ``(file, message)`` pairs that generate an artifact, in order."""

    return [
        (schema_file, message)
        for schema_file in files
        if not schema_file.should_skip
        for message in schema_file.messages
    ]

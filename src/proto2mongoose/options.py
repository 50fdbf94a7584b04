"""Resolve the Mongoose custom options attached to fields and messages.

The option extensions are declared in an ordinary ``.proto`` file (see
``proto/mongoose/options/v1/mongoose_options.proto``) that the generated files
import. ``protoc`` passes that file along in the request, but the plugin's own
descriptor pool does not know about it, so the extension values arrive as
unknown fields. :class:`OptionResolver` loads the declaring files into a
private pool and re-parses option messages with dynamic classes, which gives
back the usual ``HasExtension`` / ``Extensions[...]`` API.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Set, Tuple

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory
from google.protobuf.compiler import plugin_pb2
from google.protobuf.descriptor import FieldDescriptor

from . import model
from .exceptions import GenerationError
from .naming import strip_leading_dot

logger = logging.getLogger(__name__)

_DESCRIPTOR_PROTO_NAME = "google/protobuf/descriptor.proto"
_FIELD_OPTIONS = "google.protobuf.FieldOptions"
_MESSAGE_OPTIONS = "google.protobuf.MessageOptions"
_EXTENSION_PREFIX = "mongoose_"

# Extension name without the mongoose_ prefix -> FieldOptions attribute.
_FIELD_FLAGS: Dict[str, str] = {
    "unique": "unique",
    "required": "required",
    "index": "indexed",
}
_COLLECTION = "collection"


@dataclass(frozen=True, slots=True)
class ExtensionDeclaration:
    """An option extension found in the request."""

    file_name: str
    full_name: str
    extendee: str
    option: str


def _option_name(extension_name: str) -> Optional[str]:
    if not extension_name.startswith(_EXTENSION_PREFIX):
        return None
    return extension_name[len(_EXTENSION_PREFIX):]


def _is_mongoose_option(extendee: str, option: Optional[str]) -> bool:
    if option is None:
        return False
    if extendee == _FIELD_OPTIONS:
        return option in _FIELD_FLAGS
    if extendee == _MESSAGE_OPTIONS:
        return option == _COLLECTION
    return False


def find_extension_declarations(
    proto_files: Iterable[descriptor_pb2.FileDescriptorProto],
) -> List[ExtensionDeclaration]:
    """Return every Mongoose option extension declared in *proto_files*."""

    found: List[ExtensionDeclaration] = []
    for file_proto in proto_files:
        scopes: List[Tuple[str, Iterable[descriptor_pb2.FieldDescriptorProto]]] = [
            (file_proto.package, file_proto.extension)
        ]
        pending = [(file_proto.package, message) for message in file_proto.message_type]
        while pending:
            parent, message_proto = pending.pop(0)
            scope = f"{parent}.{message_proto.name}" if parent else message_proto.name
            scopes.append((scope, message_proto.extension))
            pending.extend((scope, nested) for nested in message_proto.nested_type)

        for scope, extensions in scopes:
            for extension in extensions:
                extendee = strip_leading_dot(extension.extendee)
                option = _option_name(extension.name)
                if not _is_mongoose_option(extendee, option):
                    continue
                full_name = f"{scope}.{extension.name}" if scope else extension.name
                found.append(
                    ExtensionDeclaration(
                        file_name=file_proto.name,
                        full_name=full_name,
                        extendee=extendee,
                        option=option,
                    )
                )
    return found


class OptionResolver:
    """Resolve field flags and collection overrides from descriptor options."""

    def __init__(
        self,
        proto_files: Iterable[descriptor_pb2.FileDescriptorProto],
    ) -> None:
        self._files: Dict[str, descriptor_pb2.FileDescriptorProto] = {
            file_proto.name: file_proto for file_proto in proto_files
        }
        self._declarations = find_extension_declarations(self._files.values())
        self._field_options_cls = None
        self._message_options_cls = None
        self._field_extensions: List[Tuple[str, FieldDescriptor]] = []
        self._collection_extensions: List[FieldDescriptor] = []
        if self._declarations:
            self._load_extensions()
        logger.debug("Resolved %d Mongoose option extension(s)", len(self._declarations))

    @classmethod
    def from_request(cls, request: plugin_pb2.CodeGeneratorRequest) -> "OptionResolver":
        return cls(request.proto_file)

    @property
    def declarations(self) -> List[ExtensionDeclaration]:
        return list(self._declarations)

    def resolve_field(self, field_proto: descriptor_pb2.FieldDescriptorProto) -> model.FieldOptions:
        """Return the flags set to a truthy value on *field_proto*."""

        if not self._field_extensions or not field_proto.HasField("options"):
            return model.FieldOptions()

        options = self._field_options_cls.FromString(field_proto.options.SerializeToString())
        flags: Dict[str, bool] = {}
        for attribute, extension in self._field_extensions:
            if options.HasExtension(extension) and options.Extensions[extension]:
                flags[attribute] = True
        return model.FieldOptions(**flags)

    def resolve_collection(self, message_proto: descriptor_pb2.DescriptorProto) -> Optional[str]:
        """Return the collection override on *message_proto*, if one is set."""

        if not self._collection_extensions or not message_proto.HasField("options"):
            return None

        options = self._message_options_cls.FromString(message_proto.options.SerializeToString())
        for extension in self._collection_extensions:
            if options.HasExtension(extension):
                return str(options.Extensions[extension])
        return None

    def _load_extensions(self) -> None:
        pool = descriptor_pool.DescriptorPool()
        added: Set[str] = set()
        self._add_file(pool, _DESCRIPTOR_PROTO_NAME, added)
        for declaration in self._declarations:
            self._add_file(pool, declaration.file_name, added)

        classes = message_factory.GetMessageClassesForFiles(sorted(added), pool)
        self._field_options_cls = classes[_FIELD_OPTIONS]
        self._message_options_cls = classes[_MESSAGE_OPTIONS]

        for declaration in self._declarations:
            extension = pool.FindExtensionByName(declaration.full_name)
            if declaration.extendee == _FIELD_OPTIONS:
                self._field_extensions.append((_FIELD_FLAGS[declaration.option], extension))
            else:
                self._collection_extensions.append(extension)

    def _add_file(
        self,
        pool: descriptor_pool.DescriptorPool,
        name: str,
        added: Set[str],
    ) -> None:
        if name in added:
            return
        added.add(name)

        file_proto = self._files.get(name)
        if file_proto is None:
            if name != _DESCRIPTOR_PROTO_NAME:
                raise GenerationError(
                    f"Option declarations depend on '{name}', which is missing from the request"
                )
            pool.AddSerializedFile(descriptor_pb2.DESCRIPTOR.serialized_pb)
            return

        for dependency in file_proto.dependency:
            self._add_file(pool, dependency, added)
        try:
            pool.AddSerializedFile(file_proto.SerializeToString())
        except (TypeError, ValueError) as exc:
            raise GenerationError(f"Unable to load option declarations from '{name}': {exc}") from exc


def emitted_option_keys(options: model.FieldOptions) -> List[str]:
    """Return the option keys set on *options*, always in the order unique, required, index."""

    keys: List[str] = []
    if options.unique:
        keys.append("unique")
    if options.required:
        keys.append("required")
    if options.indexed:
        keys.append("index")
    return keys


__all__ = [
    "ExtensionDeclaration",
    "OptionResolver",
    "find_extension_declarations",
    "emitted_option_keys",
]

from __future__ import annotations

"""Utilities to convert CodeGeneratorRequest payloads into model dataclasses."""

import logging
from typing import List, MutableMapping, Optional, Set

from google.protobuf import descriptor_pb2
from google.protobuf.compiler import plugin_pb2

from . import model
from .naming import resolve_collection_name, strip_leading_dot
from .options import OptionResolver

logger = logging.getLogger(__name__)

_FieldProto = descriptor_pb2.FieldDescriptorProto


class DescriptorLoader:
    """Load FileDescriptorProto messages into :class:`model.SchemaFile` records."""

    def __init__(
        self,
        request: plugin_pb2.CodeGeneratorRequest,
        *,
        option_resolver: Optional[OptionResolver] = None,
    ) -> None:
        self._request = request
        self._option_resolver = option_resolver
        self._loaded_files: MutableMapping[str, model.SchemaFile] = {}
        self._loaded = False

    @property
    def files(self) -> MutableMapping[str, model.SchemaFile]:
        """Mapping of file name to :class:`SchemaFile` after :meth:`load`."""

        self.load()
        return self._loaded_files

    @property
    def files_to_generate(self) -> List[str]:
        """Return the files requested for generation, or every file when none are named."""

        if self._request.file_to_generate:
            return list(self._request.file_to_generate)
        return [file_proto.name for file_proto in self._request.proto_file]

    def get_file(self, name: str) -> model.SchemaFile:
        """Return a loaded :class:`SchemaFile` by name."""

        self.load()
        return self._loaded_files[name]

    def load(self) -> MutableMapping[str, model.SchemaFile]:
        """Convert the requested files and return the mapping of names to :class:`SchemaFile`.

        Subsequent calls return cached results.
        """

        if self._loaded:
            return self._loaded_files

        if self._option_resolver is None:
            self._option_resolver = OptionResolver.from_request(self._request)

        by_name = {file_proto.name: file_proto for file_proto in self._request.proto_file}
        missing = sorted(name for name in self.files_to_generate if name not in by_name)
        if missing:
            raise KeyError(f"Descriptor(s) not found in request: {', '.join(missing)}")

        for name in self.files_to_generate:
            self._loaded_files[name] = self._convert_file(by_name[name])

        self._loaded = True
        return self._loaded_files

    def eligible(self) -> List[tuple[model.SchemaFile, model.Message]]:
        """Return the ``(file, message)`` pairs that produce an artifact, in request order."""

        files = [self.get_file(name) for name in self.files_to_generate]
        for schema_file in files:
            if schema_file.should_skip:
                logger.debug("Skipping %s: no messages or option declarations", schema_file.name)
        return model.eligible_messages(files)

    def _convert_file(self, file_proto: descriptor_pb2.FileDescriptorProto) -> model.SchemaFile:
        map_entries = self._collect_map_entries(file_proto)
        messages = tuple(
            self._convert_message(message_proto, file_proto.package, map_entries)
            for message_proto in file_proto.message_type
        )
        return model.SchemaFile(
            name=file_proto.name,
            package=file_proto.package or None,
            syntax=file_proto.syntax or "proto2",
            messages=messages,
        )

    def _convert_message(
        self,
        message_proto: descriptor_pb2.DescriptorProto,
        package: str,
        map_entries: Set[str],
    ) -> model.Message:
        full_name = self._qualify_name(package, [], message_proto.name)
        fields = tuple(
            self._convert_field(field_proto, map_entries) for field_proto in message_proto.field
        )
        override = self._option_resolver.resolve_collection(message_proto)
        return model.Message(
            name=message_proto.name,
            full_name=full_name,
            collection_name=resolve_collection_name(message_proto.name, override),
            fields=fields,
        )

    def _convert_field(self, field_proto: _FieldProto, map_entries: Set[str]) -> model.Field:
        kind = self._classify_field_type(field_proto)
        repeated = field_proto.label == _FieldProto.LABEL_REPEATED
        if isinstance(kind, model.MessageKind) and kind.type_name in map_entries:
            repeated = False

        return model.Field(
            name=field_proto.name,
            number=field_proto.number,
            kind=kind,
            repeated=repeated,
            options=self._option_resolver.resolve_field(field_proto),
        )

    def _classify_field_type(self, field_proto: _FieldProto) -> model.FieldKind:
        field_type = field_proto.type
        if field_type in (_FieldProto.TYPE_MESSAGE, _FieldProto.TYPE_GROUP):
            return model.MessageKind(strip_leading_dot(field_proto.type_name))
        if field_type == _FieldProto.TYPE_ENUM:
            return model.EnumKind(strip_leading_dot(field_proto.type_name))
        return model.ScalarKind(field_type)

    def _collect_map_entries(self, file_proto: descriptor_pb2.FileDescriptorProto) -> Set[str]:
        entries: Set[str] = set()
        pending = [([message.name], message) for message in file_proto.message_type]
        while pending:
            parents, message_proto = pending.pop()
            for nested in message_proto.nested_type:
                chain = parents + [nested.name]
                if nested.options.map_entry:
                    entries.add(self._qualify_name(file_proto.package, parents, nested.name))
                pending.append((chain, nested))
        return entries

    def _qualify_name(self, package: Optional[str], parents: List[str], name: str) -> str:
        segments: List[str] = []
        if package:
            segments.append(package)
        segments.extend(parents)
        segments.append(name)
        return ".".join(segment for segment in segments if segment)

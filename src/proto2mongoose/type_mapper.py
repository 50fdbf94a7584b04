"""Mapping from protobuf field kinds to Mongoose schema field types."""

from __future__ import annotations

from typing import Dict, FrozenSet, assert_never

from google.protobuf import descriptor_pb2

from . import model
from .naming import strip_leading_dot

_FieldProto = descriptor_pb2.FieldDescriptorProto

TIMESTAMP_TYPE_NAME = "google.protobuf.Timestamp"

NUMERIC_SCALARS: FrozenSet[int] = frozenset(
    {
        _FieldProto.TYPE_DOUBLE,
        _FieldProto.TYPE_FLOAT,
        _FieldProto.TYPE_INT64,
        _FieldProto.TYPE_UINT64,
        _FieldProto.TYPE_INT32,
        _FieldProto.TYPE_FIXED64,
        _FieldProto.TYPE_FIXED32,
        _FieldProto.TYPE_UINT32,
        _FieldProto.TYPE_SFIXED32,
        _FieldProto.TYPE_SFIXED64,
        _FieldProto.TYPE_SINT32,
        _FieldProto.TYPE_SINT64,
    }
)

_SCALAR_MAPPING: Dict[int, model.TargetFieldType] = {
    **{code: model.TargetFieldType.NUMBER for code in NUMERIC_SCALARS},
    _FieldProto.TYPE_STRING: model.TargetFieldType.STRING,
    _FieldProto.TYPE_BOOL: model.TargetFieldType.BOOLEAN,
    _FieldProto.TYPE_BYTES: model.TargetFieldType.BINARY_BUFFER,
}


def scalar_target_type(code: int) -> model.TargetFieldType:
    """Map a scalar type code; codes outside the table fall back to ``String``."""

    return _SCALAR_MAPPING.get(code, model.TargetFieldType.STRING)


def map_kind(kind: model.FieldKind) -> model.TargetFieldType:
    """Return the Mongoose field type for *kind*."""

    match kind:
        case model.ScalarKind(code=code):
            return scalar_target_type(code)
        case model.MessageKind(type_name=type_name):
            if strip_leading_dot(type_name) == TIMESTAMP_TYPE_NAME:
                return model.TargetFieldType.DATE
            return model.TargetFieldType.MIXED_OR_OPAQUE
        case model.EnumKind():
            # Enums are stored by symbolic name.
            return model.TargetFieldType.STRING
        case _:
            assert_never(kind)


class TypeMapper:
    """Maps :class:`model.Field` records onto Mongoose type expressions."""

    _TYPE_EXPRESSIONS: Dict[model.TargetFieldType, str] = {
        model.TargetFieldType.STRING: "String",
        model.TargetFieldType.NUMBER: "Number",
        model.TargetFieldType.BOOLEAN: "Boolean",
        model.TargetFieldType.BINARY_BUFFER: "Buffer",
        model.TargetFieldType.DATE: "Date",
        model.TargetFieldType.MIXED_OR_OPAQUE: "Schema.Types.Mixed",
    }

    def target_type(self, field: model.Field) -> model.TargetFieldType:
        return map_kind(field.kind)

    def type_expression(self, field: model.Field) -> str:
        """Return the source text used for the field's ``type``.

        List fields wrap the element type in brackets, the Mongoose array form.
        """

        expression = self._TYPE_EXPRESSIONS[self.target_type(field)]
        if field.repeated:
            return f"[{expression}]"
        return expression


__all__ = [
    "NUMERIC_SCALARS",
    "TIMESTAMP_TYPE_NAME",
    "TypeMapper",
    "map_kind",
    "scalar_target_type",
]

from __future__ import annotations

import pytest

pytest.importorskip("google.protobuf")

from google.protobuf import descriptor_pb2

from proto2mongoose import model
from proto2mongoose.type_mapper import TypeMapper, map_kind, scalar_target_type

FieldProto = descriptor_pb2.FieldDescriptorProto
T = model.TargetFieldType


@pytest.mark.parametrize(
    ("code", "expected"),
    [
        (FieldProto.TYPE_DOUBLE, T.NUMBER),
        (FieldProto.TYPE_FLOAT, T.NUMBER),
        (FieldProto.TYPE_INT64, T.NUMBER),
        (FieldProto.TYPE_UINT64, T.NUMBER),
        (FieldProto.TYPE_INT32, T.NUMBER),
        (FieldProto.TYPE_FIXED64, T.NUMBER),
        (FieldProto.TYPE_FIXED32, T.NUMBER),
        (FieldProto.TYPE_UINT32, T.NUMBER),
        (FieldProto.TYPE_SFIXED32, T.NUMBER),
        (FieldProto.TYPE_SFIXED64, T.NUMBER),
        (FieldProto.TYPE_SINT32, T.NUMBER),
        (FieldProto.TYPE_SINT64, T.NUMBER),
        (FieldProto.TYPE_STRING, T.STRING),
        (FieldProto.TYPE_BOOL, T.BOOLEAN),
        (FieldProto.TYPE_BYTES, T.BINARY_BUFFER),
    ],
)
def test_scalar_mapping_table(code: int, expected: model.TargetFieldType) -> None:
    assert scalar_target_type(code) is expected
    assert map_kind(model.ScalarKind(code)) is expected


@pytest.mark.parametrize("code", [0, FieldProto.TYPE_GROUP, 19, 99])
def test_unrecognized_scalar_codes_fall_back_to_string(code: int) -> None:
    assert map_kind(model.ScalarKind(code)) is T.STRING


def test_timestamp_message_maps_to_date() -> None:
    assert map_kind(model.MessageKind("google.protobuf.Timestamp")) is T.DATE
    assert map_kind(model.MessageKind(".google.protobuf.Timestamp")) is T.DATE


def test_only_one_leading_dot_is_stripped_before_matching() -> None:
    assert map_kind(model.MessageKind("..google.protobuf.Timestamp")) is T.MIXED_OR_OPAQUE
    assert map_kind(model.MessageKind(".example.google.protobuf.Timestamp")) is T.MIXED_OR_OPAQUE


def test_other_messages_map_to_mixed() -> None:
    assert map_kind(model.MessageKind("example.v1.Address")) is T.MIXED_OR_OPAQUE
    assert map_kind(model.MessageKind("google.protobuf.Duration")) is T.MIXED_OR_OPAQUE


def test_enums_map_to_string() -> None:
    assert map_kind(model.EnumKind("example.v1.Color")) is T.STRING


def test_mapping_ignores_field_name_and_position() -> None:
    mapper = TypeMapper()
    kind = model.ScalarKind(FieldProto.TYPE_INT32)
    first = model.Field(name="createdAt", number=1, kind=kind)
    second = model.Field(name="id", number=42, kind=kind)

    assert mapper.target_type(first) is mapper.target_type(second) is T.NUMBER


def test_type_expressions() -> None:
    mapper = TypeMapper()

    def expression(kind: model.FieldKind, repeated: bool = False) -> str:
        return mapper.type_expression(model.Field(name="f", number=1, kind=kind, repeated=repeated))

    assert expression(model.ScalarKind(FieldProto.TYPE_BYTES)) == "Buffer"
    assert expression(model.MessageKind("example.v1.Meta")) == "Schema.Types.Mixed"
    assert expression(model.MessageKind("google.protobuf.Timestamp")) == "Date"
    assert expression(model.ScalarKind(FieldProto.TYPE_STRING), repeated=True) == "[String]"

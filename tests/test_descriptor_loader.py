from __future__ import annotations

import pytest

pytest.importorskip("google.protobuf")

from builders import (
    OPTIONS_FILE,
    FieldProto,
    add_field,
    build_event_file,
    build_request,
    build_user_file,
    message_options,
    new_file,
)
from proto2mongoose import model
from proto2mongoose.descriptor_loader import DescriptorLoader


def _build_catalog_file():
    file_proto = new_file("example/catalog.proto")

    color = file_proto.enum_type.add()
    color.name = "Color"
    color.value.add(name="COLOR_UNSPECIFIED", number=0)

    product = file_proto.message_type.add()
    product.name = "Product"
    product.options.MergeFromString(message_options(collection="Catalog"))

    labels_entry = product.nested_type.add()
    labels_entry.name = "LabelsEntry"
    labels_entry.options.map_entry = True
    add_field(labels_entry, "key", 1, FieldProto.TYPE_STRING)
    add_field(labels_entry, "value", 2, FieldProto.TYPE_STRING)

    dimensions = product.nested_type.add()
    dimensions.name = "Dimensions"
    add_field(dimensions, "width", 1, FieldProto.TYPE_DOUBLE)

    add_field(product, "sku", 1, FieldProto.TYPE_STRING)
    add_field(product, "price", 2, FieldProto.TYPE_DOUBLE)
    add_field(product, "color", 3, FieldProto.TYPE_ENUM, type_name=".example.v1.Color")
    add_field(
        product,
        "tags",
        4,
        FieldProto.TYPE_STRING,
        label=FieldProto.LABEL_REPEATED,
    )
    add_field(
        product,
        "labels",
        5,
        FieldProto.TYPE_MESSAGE,
        type_name=".example.v1.Product.LabelsEntry",
        label=FieldProto.LABEL_REPEATED,
    )
    add_field(
        product,
        "dimensions",
        6,
        FieldProto.TYPE_MESSAGE,
        type_name=".example.v1.Product.Dimensions",
    )

    order = file_proto.message_type.add()
    order.name = "Order"
    add_field(order, "total", 1, FieldProto.TYPE_INT64)
    return file_proto


def test_descriptor_loader_builds_schema_files() -> None:
    request = build_request(_build_catalog_file())
    loader = DescriptorLoader(request)
    files = loader.load()

    assert list(files) == ["example/catalog.proto"]
    catalog = files["example/catalog.proto"]
    assert catalog.package == "example.v1"
    assert catalog.syntax == "proto3"
    assert [message.name for message in catalog.messages] == ["Product", "Order"]

    product, order = catalog.messages
    assert product.full_name == "example.v1.Product"
    assert product.collection_name == "Catalog"
    assert order.collection_name == "orders"

    assert [field.name for field in product.fields] == [
        "sku",
        "price",
        "color",
        "tags",
        "labels",
        "dimensions",
    ]
    sku, price, color, tags, labels, dimensions = product.fields
    assert sku.kind == model.ScalarKind(FieldProto.TYPE_STRING)
    assert price.kind == model.ScalarKind(FieldProto.TYPE_DOUBLE)
    assert color.kind == model.EnumKind("example.v1.Color")
    assert tags.repeated is True
    assert labels.kind == model.MessageKind("example.v1.Product.LabelsEntry")
    assert labels.repeated is False
    assert dimensions.kind == model.MessageKind("example.v1.Product.Dimensions")


def test_field_options_are_resolved_once_into_records() -> None:
    loader = DescriptorLoader(build_request(build_user_file()))

    user = loader.get_file("example/user.proto").messages[0]

    assert [field.options for field in user.fields] == [
        model.FieldOptions(unique=True),
        model.FieldOptions(required=True),
        model.FieldOptions(indexed=True),
    ]


def test_skipped_files_contribute_no_messages() -> None:
    empty = new_file("example/empty.proto", with_options=False)
    request = build_request(
        empty,
        build_user_file(),
        to_generate=[OPTIONS_FILE, "example/empty.proto", "example/user.proto"],
    )
    loader = DescriptorLoader(request)

    assert loader.get_file(OPTIONS_FILE).should_skip is True
    assert loader.get_file("example/empty.proto").should_skip is True
    assert [(f.name, m.name) for f, m in loader.eligible()] == [("example/user.proto", "User")]


def test_option_marker_is_a_plain_substring_match() -> None:
    file_proto = new_file("example/shipping_options_v2.proto", with_options=False)
    message = file_proto.message_type.add()
    message.name = "Shipping"
    add_field(message, "carrier", 1, FieldProto.TYPE_STRING)

    loader = DescriptorLoader(build_request(file_proto))

    assert loader.eligible() == []


def test_all_files_are_generated_when_none_are_requested() -> None:
    request = build_request(build_user_file(), build_event_file(), to_generate=[])
    loader = DescriptorLoader(request)

    assert loader.files_to_generate == [OPTIONS_FILE, "example/user.proto", "example/event.proto"]
    assert [message.name for _, message in loader.eligible()] == ["User", "Event"]


def test_missing_requested_file_raises_key_error() -> None:
    request = build_request(build_user_file(), to_generate=["example/missing.proto"])

    with pytest.raises(KeyError):
        DescriptorLoader(request).load()

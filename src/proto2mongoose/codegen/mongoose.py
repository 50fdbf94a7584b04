"""Mongoose schema template for a single protobuf message."""

from __future__ import annotations

from typing import List

from .. import model
from ..config import GeneratorConfig
from ..naming import schema_export_name
from ..options import emitted_option_keys
from ..type_mapper import TypeMapper

GENERATOR_NAME = "protoc-gen-mongoose"
GENERATOR_VERSION = "v1.0.0"

_INDENT = "  "


_JS_ESCAPES = {
    "\\": "\\\\",
    "'": "\\'",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


def _escape_char(char: str) -> str:
    escaped = _JS_ESCAPES.get(char)
    if escaped is not None:
        return escaped
    if ord(char) < 0x20 or ord(char) == 0x7F:
        return f"\\x{ord(char):02x}"
    return char


def _quote(value: str) -> str:
    """Return *value* as a single-quoted JavaScript string literal."""

    return "'" + "".join(_escape_char(char) for char in value) + "'"


class MongooseSchemaTemplate:
    """Render the schema module for *message* declared in *schema_file*.

    Rendering is a pure function of the inputs; the same message always
    produces byte-identical text.
    """

    def __init__(
        self,
        schema_file: model.SchemaFile,
        message: model.Message,
        *,
        config: GeneratorConfig | None = None,
        type_mapper: TypeMapper | None = None,
    ) -> None:
        self._file = schema_file
        self._message = message
        self._config = config or GeneratorConfig()
        self._type_mapper = type_mapper or TypeMapper()

    def render(self) -> str:
        lines: List[str] = []
        lines.extend(self._render_preamble())
        lines.append("")
        lines.append(self._render_import())
        lines.append("")
        lines.extend(self._render_schema())
        if not self._config.uses_es_modules:
            lines.append("")
            lines.append(f"module.exports = {{ {schema_export_name(self._message.name)} }};")
        return "\n".join(lines) + "\n"

    def _render_preamble(self) -> List[str]:
        origin = f"syntax {self._file.syntax}"
        if self._file.package:
            origin = f"package {self._file.package}, {origin}"
        return [
            f"// @generated by {GENERATOR_NAME} {GENERATOR_VERSION}",
            f"// @generated from file {self._file.name} ({origin})",
            "/* eslint-disable */",
        ]

    def _render_import(self) -> str:
        if self._config.uses_es_modules:
            return "import { Schema } from 'mongoose';"
        return "const { Schema } = require('mongoose');"

    def _render_schema(self) -> List[str]:
        export = schema_export_name(self._message.name)
        declaration = f"const {export} = new Schema({{"
        if self._config.uses_es_modules:
            declaration = f"export {declaration}"

        lines = [declaration]
        fields = self._message.fields
        for index, field in enumerate(fields):
            separator = "," if index < len(fields) - 1 else ""
            lines.append(f"{_INDENT}{self._render_field(field)}{separator}")
        lines.append("}, {")
        lines.append(f"{_INDENT}collection: {_quote(self._message.collection_name)},")
        lines.append(f"{_INDENT}timestamps: true")
        lines.append("});")
        return lines

    def _render_field(self, field: model.Field) -> str:
        type_expression = self._type_mapper.type_expression(field)
        option_keys = emitted_option_keys(field.options)
        if not option_keys:
            return f"{field.name}: {type_expression}"

        entries = [f"type: {type_expression}"]
        entries.extend(f"{key}: true" for key in option_keys)
        return f"{field.name}: {{ {', '.join(entries)} }}"


def render_schema(
    schema_file: model.SchemaFile,
    message: model.Message,
    config: GeneratorConfig | None = None,
) -> str:
    """Return the generated schema source for *message*."""

    return MongooseSchemaTemplate(schema_file, message, config=config).render()


__all__ = [
    "GENERATOR_NAME",
    "GENERATOR_VERSION",
    "MongooseSchemaTemplate",
    "render_schema",
]

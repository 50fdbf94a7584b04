"""Code generation entry points for proto2mongoose."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Protocol

from .. import model
from ..config import GeneratorConfig
from ..naming import output_filename
from ..type_mapper import TypeMapper
from .mongoose import MongooseSchemaTemplate, render_schema


@dataclass(frozen=True, slots=True)
class GeneratedFile:
    """A rendered artifact handed back to the host for writing."""

    name: str
    content: str


class ITemplateRenderer(Protocol):
    def render(self, schema_file: model.SchemaFile, message: model.Message) -> GeneratedFile:
        ...


class DefaultTemplateRenderer:
    """Render one Mongoose schema file per message."""

    def __init__(
        self,
        config: GeneratorConfig | None = None,
        *,
        type_mapper: TypeMapper | None = None,
    ) -> None:
        self._config = config or GeneratorConfig()
        self._type_mapper = type_mapper or TypeMapper()

    def render(self, schema_file: model.SchemaFile, message: model.Message) -> GeneratedFile:
        template = MongooseSchemaTemplate(
            schema_file,
            message,
            config=self._config,
            type_mapper=self._type_mapper,
        )
        return GeneratedFile(
            name=output_filename(message.name, self._config.file_suffix),
            content=template.render(),
        )

    def render_all(
        self, pairs: Iterable[tuple[model.SchemaFile, model.Message]]
    ) -> List[GeneratedFile]:
        return [self.render(schema_file, message) for schema_file, message in pairs]


__all__ = [
    "DefaultTemplateRenderer",
    "GeneratedFile",
    "ITemplateRenderer",
    "MongooseSchemaTemplate",
    "render_schema",
]

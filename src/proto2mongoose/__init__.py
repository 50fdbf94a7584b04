"""proto2mongoose package initialization."""

from __future__ import annotations

from . import model

__version__ = "1.0.0"

__all__ = [
    "DefaultTemplateRenderer",
    "DescriptorLoader",
    "GeneratedFile",
    "GeneratorConfig",
    "ITemplateRenderer",
    "OptionResolver",
    "TypeMapper",
    "generate_code",
    "map_kind",
    "model",
]


def __getattr__(name: str):
    if name == "DescriptorLoader":
        from .descriptor_loader import DescriptorLoader

        return DescriptorLoader

    if name == "OptionResolver":
        from .options import OptionResolver

        return OptionResolver

    if name in {"DefaultTemplateRenderer", "GeneratedFile", "ITemplateRenderer"}:
        from .codegen import DefaultTemplateRenderer, GeneratedFile, ITemplateRenderer

        mapping = {
            "DefaultTemplateRenderer": DefaultTemplateRenderer,
            "GeneratedFile": GeneratedFile,
            "ITemplateRenderer": ITemplateRenderer,
        }
        return mapping[name]

    if name == "GeneratorConfig":
        from .config import GeneratorConfig

        return GeneratorConfig

    if name in {"TypeMapper", "map_kind"}:
        from .type_mapper import TypeMapper, map_kind

        mapping = {"TypeMapper": TypeMapper, "map_kind": map_kind}
        return mapping[name]

    if name == "generate_code":
        from .plugin import generate_code

        return generate_code

    raise AttributeError(name)

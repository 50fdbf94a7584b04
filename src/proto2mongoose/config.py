"""Configuration helpers for proto2mongoose code generation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

DEFAULT_TARGET = "ts"

_TARGET_SUFFIXES: Dict[str, str] = {
    "ts": ".ts",
    "js": ".js",
}


def _parse_parameter_string(parameter: str | None) -> Dict[str, str]:
    if not parameter:
        return {}

    entries = parameter.replace(";", ",").split(",")
    result: Dict[str, str] = {}
    for entry in entries:
        piece = entry.strip()
        if not piece:
            continue
        if "=" in piece:
            key, value = piece.split("=", 1)
            result[key.strip().lower()] = value.strip()
        else:
            result[piece.lower()] = "true"
    return result


@dataclass(frozen=True, slots=True)
class GeneratorConfig:
    """Runtime configuration for proto2mongoose generation."""

    target: str = DEFAULT_TARGET

    def __post_init__(self) -> None:
        if self.target not in _TARGET_SUFFIXES:
            supported = ", ".join(sorted(_TARGET_SUFFIXES))
            raise ValueError(
                f"Unsupported target '{self.target}', expected one of: {supported}"
            )

    @property
    def file_suffix(self) -> str:
        return _TARGET_SUFFIXES[self.target]

    @property
    def uses_es_modules(self) -> bool:
        return self.target == "ts"

    @classmethod
    def from_parameter_string(cls, parameter: str | None) -> "GeneratorConfig":
        overrides = _parse_parameter_string(parameter)
        target = overrides.get("target") or DEFAULT_TARGET
        return cls(target=target.lower())


__all__ = ["DEFAULT_TARGET", "GeneratorConfig"]

from __future__ import annotations

"""Command-line helpers for generating Mongoose schemas without protoc."""

import argparse
import logging
from pathlib import Path
from typing import List, Sequence

from google.protobuf import descriptor_pb2
from google.protobuf.compiler import plugin_pb2

from proto2mongoose.plugin import render_files

logger = logging.getLogger(__name__)


def _build_request(
    descriptor_set: descriptor_pb2.FileDescriptorSet,
    targets: Sequence[str] | None,
    target_language: str,
) -> plugin_pb2.CodeGeneratorRequest:
    request = plugin_pb2.CodeGeneratorRequest()
    request.proto_file.extend(descriptor_set.file)
    request.parameter = f"target={target_language}"

    if targets:
        request.file_to_generate.extend(targets)
    else:
        request.file_to_generate.extend(file_proto.name for file_proto in descriptor_set.file)

    return request


def generate_schemas(
    descriptor_set_path: Path | str,
    targets: Sequence[str] | None,
    output_dir: Path | str,
    *,
    target_language: str = "ts",
) -> List[Path]:
    """Generate schema files for the given targets.

    Parameters
    ----------
    descriptor_set_path:
        Path to a serialized :class:`~google.protobuf.descriptor_pb2.FileDescriptorSet`
        produced with ``--include_imports``.
    targets:
        Proto filenames (as understood by ``protoc``) to generate. ``None`` means "all".
    output_dir:
        Directory that will receive one schema file per message.
    """

    descriptor_set_path = Path(descriptor_set_path)
    output_dir = Path(output_dir)

    descriptor_set = descriptor_pb2.FileDescriptorSet()
    descriptor_set.ParseFromString(descriptor_set_path.read_bytes())

    request = _build_request(descriptor_set, targets, target_language)

    generated_paths: List[Path] = []
    output_dir.mkdir(parents=True, exist_ok=True)
    for generated in render_files(request):
        path = output_dir / generated.name
        path.write_text(generated.content, encoding="utf-8")
        logger.debug("Wrote %s", path)
        generated_paths.append(path)

    return generated_paths


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate Mongoose schema files from a descriptor set produced by protoc."
    )
    parser.add_argument(
        "descriptor_set",
        type=Path,
        help="Path to a serialized FileDescriptorSet (output of protoc --descriptor_set_out)",
    )
    parser.add_argument(
        "--proto",
        dest="protos",
        action="append",
        help=(
            "Proto file to generate (relative to the descriptor). Repeat for multiple files. "
            "Defaults to all entries in the descriptor set."
        ),
    )
    parser.add_argument(
        "--out",
        dest="output",
        required=True,
        type=Path,
        help="Directory to write the generated schemas to",
    )
    parser.add_argument(
        "--target",
        choices=("ts", "js"),
        default="ts",
        help="Module flavour of the generated files",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point used by ``python -m proto2mongoose.tools.generate``."""

    parser = _build_argument_parser()
    args = parser.parse_args(argv)

    generated_paths = generate_schemas(
        args.descriptor_set,
        args.protos,
        args.output,
        target_language=args.target,
    )

    for path in generated_paths:
        print(path)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())

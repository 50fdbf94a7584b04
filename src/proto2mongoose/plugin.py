"""Protocol Buffers compiler plugin entry point for proto2mongoose."""
from __future__ import annotations

import logging
import os
import sys
from typing import BinaryIO, List

from google.protobuf.compiler import plugin_pb2
from google.protobuf.message import DecodeError

from .codegen import DefaultTemplateRenderer, GeneratedFile, ITemplateRenderer
from .config import GeneratorConfig
from .descriptor_loader import DescriptorLoader
from .exceptions import GenerationError, RequestDecodeError

logger = logging.getLogger(__name__)

_LOG_LEVEL_ENV = "PROTO2MONGOOSE_LOG_LEVEL"


def parse_request(payload: bytes) -> plugin_pb2.CodeGeneratorRequest:
    """Decode a serialized ``CodeGeneratorRequest``."""

    request = plugin_pb2.CodeGeneratorRequest()
    try:
        request.ParseFromString(payload)
    except DecodeError as exc:
        raise RequestDecodeError(f"Unable to decode CodeGeneratorRequest: {exc}") from exc
    return request


def render_files(
    request: plugin_pb2.CodeGeneratorRequest,
    *,
    renderer: ITemplateRenderer | None = None,
) -> List[GeneratedFile]:
    """Run the pipeline and return the artifacts in declaration order."""

    try:
        config = GeneratorConfig.from_parameter_string(request.parameter)
    except ValueError as exc:
        raise GenerationError(str(exc)) from exc

    loader = DescriptorLoader(request)
    try:
        loader.load()
    except KeyError as exc:
        raise GenerationError(exc.args[0]) from exc

    renderer = renderer or DefaultTemplateRenderer(config)
    generated: List[GeneratedFile] = []
    for schema_file, message in loader.eligible():
        artifact = renderer.render(schema_file, message)
        logger.debug("Rendered %s from %s", artifact.name, schema_file.name)
        generated.append(artifact)
    return generated


def generate_code(
    request: plugin_pb2.CodeGeneratorRequest,
    *,
    renderer: ITemplateRenderer | None = None,
) -> plugin_pb2.CodeGeneratorResponse:
    """Run the proto2mongoose pipeline and return a populated response message."""

    response = plugin_pb2.CodeGeneratorResponse()
    response.supported_features = plugin_pb2.CodeGeneratorResponse.FEATURE_PROTO3_OPTIONAL

    for generated in render_files(request, renderer=renderer):
        response_file = response.file.add()
        response_file.name = generated.name
        response_file.content = generated.content

    return response


def configure_logging() -> None:
    """Send log records to stderr; stdout carries the response."""

    level_name = os.environ.get(_LOG_LEVEL_ENV, "WARNING").upper()
    logging.basicConfig(
        stream=sys.stderr,
        level=getattr(logging, level_name, logging.WARNING),
        format="protoc-gen-mongoose: %(levelname)s %(name)s: %(message)s",
    )


def run(stdin: BinaryIO, stdout: BinaryIO) -> int:
    """Read a request from *stdin*, write the response to *stdout* and return the exit status."""

    try:
        request = parse_request(stdin.read())
        response = generate_code(request)
    except (RequestDecodeError, GenerationError) as exc:
        logger.error("%s", exc)
        response = plugin_pb2.CodeGeneratorResponse()
        response.error = str(exc)
        stdout.write(response.SerializeToString())
        return 1

    stdout.write(response.SerializeToString())
    return 0


def main() -> int:
    """Execute the protoc plugin workflow."""

    configure_logging()
    return run(sys.stdin.buffer, sys.stdout.buffer)


if __name__ == "__main__":  # pragma: no cover - convenience execution entry.
    sys.exit(main())

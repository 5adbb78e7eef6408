"""mdBook preprocessor protocol.

mdBook runs a preprocessor twice: once as ``<command> supports <renderer>``
(answered by the exit code) and once with no arguments, writing
``[context, book]`` as JSON on stdin and reading the book back from stdout.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import IO, Any

from .errors import ProtocolError
from .utils import env_bool

LOGGER = logging.getLogger(__name__)

# Inclusive lower bound, exclusive upper bound.
SUPPORTED_MDBOOK_VERSIONS: tuple[tuple[int, int, int], tuple[int, int, int]] = ((0, 4, 0), (0, 6, 0))

IGNORE_VERSION_ENV = "ROLLTABLES_IGNORE_VERSION"

_SEMVER_PATTERN = re.compile(r"^v?(\d+)\.(\d+)\.(\d+)(?:[-+][0-9A-Za-z.+-]*)?$")


@dataclass(slots=True)
class PreprocessorContext:
    root: str
    config: dict[str, Any]
    renderer: str
    mdbook_version: str
    extra: dict[str, Any] = field(default_factory=dict)

    def preprocessor_options(self, name: str) -> Any:
        preprocessors = self.config.get("preprocessor")
        if not isinstance(preprocessors, Mapping):
            return None
        return preprocessors.get(name)


def parse_version(version: str) -> tuple[int, int, int]:
    match = _SEMVER_PATTERN.match(version.strip())
    if not match:
        raise ProtocolError(f"Unparsable mdBook version: {version!r}")
    major, minor, patch = (int(part) for part in match.groups())
    return major, minor, patch


def _format_range() -> str:
    lower, upper = SUPPORTED_MDBOOK_VERSIONS
    return f">={'.'.join(map(str, lower))}, <{'.'.join(map(str, upper))}"


def is_supported_version(version: str) -> bool:
    lower, upper = SUPPORTED_MDBOOK_VERSIONS
    return lower <= parse_version(version) < upper


def check_compatibility(version: str, *, ignore_mismatch: bool | None = None) -> None:
    """Make sure the calling mdBook speaks a protocol we understand.

    Raises:
        ProtocolError: If the version is unparsable, or unsupported and the
            mismatch is not ignored via ``ROLLTABLES_IGNORE_VERSION``.
    """
    if is_supported_version(version):
        return
    if ignore_mismatch is None:
        ignore_mismatch = bool(env_bool(IGNORE_VERSION_ENV))
    message = f"rolltables supports mdBook {_format_range()} but was called from version {version}"
    if ignore_mismatch:
        LOGGER.warning(message)
        return
    raise ProtocolError(message)


def parse_payload(raw: str) -> tuple[PreprocessorContext, dict[str, Any]]:
    """Decode the ``[context, book]`` payload.

    Raises:
        ProtocolError: If the payload is not valid JSON or has the wrong shape.
    """
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ProtocolError(f"Input is not valid JSON: {exc}") from exc

    if not isinstance(payload, list) or len(payload) != 2:
        raise ProtocolError("Expected a JSON array of [context, book]")
    raw_context, book = payload
    if not isinstance(raw_context, dict) or not isinstance(book, dict):
        raise ProtocolError("Both context and book must be JSON objects")

    missing = [key for key in ("root", "config", "renderer", "mdbook_version") if key not in raw_context]
    if missing:
        raise ProtocolError(f"Context is missing {', '.join(missing)}")

    config = raw_context["config"]
    if not isinstance(config, dict):
        raise ProtocolError("Context 'config' must be an object")
    version = raw_context["mdbook_version"]
    if not isinstance(version, str):
        raise ProtocolError("Context 'mdbook_version' must be a string")

    context = PreprocessorContext(
        root=str(raw_context["root"]),
        config=config,
        renderer=str(raw_context["renderer"]),
        mdbook_version=version,
        extra={key: value for key, value in raw_context.items()
               if key not in {"root", "config", "renderer", "mdbook_version"}},
    )
    return context, book


def read_input(stream: IO[str]) -> tuple[PreprocessorContext, dict[str, Any]]:
    try:
        raw = stream.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise ProtocolError(f"Unable to read preprocessor input: {exc}") from exc
    context, book = parse_payload(raw)
    check_compatibility(context.mdbook_version)
    return context, book


def write_output(book: Mapping[str, Any], stream: IO[str]) -> None:
    stream.write(json.dumps(book, ensure_ascii=False))
    stream.flush()

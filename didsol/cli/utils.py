"""Input handling and conversion helpers for the didsol CLI."""

import base64
import binascii
import dataclasses
import sys
from enum import Enum
from pathlib import Path
from typing import Any

from didsol.did.models import PublicKey

# Exit codes
EXIT_SUCCESS = 0
EXIT_PARSE_ERROR = 2
EXIT_VALIDATION_FAILURE = 3


class InputEncoding(str, Enum):
    auto = "auto"
    hex = "hex"
    base64 = "base64"
    raw = "raw"


def _decode_text(text: str, encoding: InputEncoding) -> bytes:
    text = "".join(text.split())
    if text.startswith(("0x", "0X")):
        text = text[2:]
    if encoding in (InputEncoding.hex, InputEncoding.auto):
        try:
            return bytes.fromhex(text)
        except ValueError:
            if encoding == InputEncoding.hex:
                raise ValueError("input is not valid hex")
    try:
        return base64.b64decode(text, validate=True)
    except binascii.Error:
        raise ValueError("input is neither hex nor base64")


def _is_file(path: Path) -> bool:
    # Hex and base64 literals routinely exceed the filename limit
    try:
        return path.is_file()
    except OSError:
        return False


def read_bytes_input(source: str, encoding: InputEncoding = InputEncoding.auto) -> bytes:
    """Read binary input from a literal, a file path, or '-' for stdin.

    Files are read as raw bytes in auto mode. Literals and stdin are text,
    tried as hex first, then base64.

    Raises:
        ValueError: If the text does not decode under the chosen encoding.
    """
    if source == "-":
        raw = sys.stdin.buffer.read()
        if encoding == InputEncoding.raw:
            return raw
        return _decode_text(raw.decode("ascii", errors="replace"), encoding)

    path = Path(source)
    if _is_file(path):
        raw = path.read_bytes()
        if encoding in (InputEncoding.raw, InputEncoding.auto):
            return raw
        return _decode_text(raw.decode("ascii", errors="replace"), encoding)

    if encoding == InputEncoding.raw:
        return source.encode("utf-8")
    return _decode_text(source, encoding)


def dataclass_to_dict(obj: Any) -> Any:
    """Convert decoded records into JSON-ready values."""
    if isinstance(obj, PublicKey):
        return obj.to_base58()
    if isinstance(obj, Enum):
        return obj.name
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        result = {f.name: dataclass_to_dict(getattr(obj, f.name)) for f in dataclasses.fields(obj)}
        kind = getattr(obj, "kind", None)
        if kind is not None:
            result = {"kind": kind.name, **result}
        return result
    if isinstance(obj, (list, tuple)):
        return [dataclass_to_dict(item) for item in obj]
    return obj

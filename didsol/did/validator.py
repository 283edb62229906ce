"""DID document shape validation.

Decoding only proves the bytes were long enough. A buffer written under a
different layout can decode without underrun and still assemble nonsense,
and documents built from JSON never went through the cursor at all. This
module checks the assembled record against the shape consumers expect:

- every required field present and not None
- scalars of the right primitive kind (string, u32, public key)
- every list field a list (possibly empty) of correctly shaped elements

Cross-references between relationship lists and verification method ids
are checked only on request (check_references / strict_references).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from didsol.core import config

from .exceptions import SchemaError
from .models import (
    RELATIONSHIP_FIELDS,
    DidDocument,
    PublicKey,
    ServiceEndpoint,
    VerificationMethod,
)

U32_MAX = 0xFFFFFFFF


class FieldShape(Enum):
    """Closed set of field shapes a DID document is built from."""

    PUBLIC_KEY = "public key"
    U32 = "u32"
    STRING = "string"
    KEY_LIST = "list of public keys"
    STRING_LIST = "list of strings"
    METHOD_LIST = "list of verification methods"
    SERVICE_LIST = "list of services"


DOCUMENT_FIELDS: Tuple[Tuple[str, FieldShape], ...] = (
    ("account", FieldShape.PUBLIC_KEY),
    ("authority", FieldShape.PUBLIC_KEY),
    ("account_version", FieldShape.U32),
    ("doc_version", FieldShape.STRING),
    ("controllers", FieldShape.KEY_LIST),
    ("verification_methods", FieldShape.METHOD_LIST),
    *((name, FieldShape.STRING_LIST) for name in RELATIONSHIP_FIELDS),
    ("services", FieldShape.SERVICE_LIST),
)

METHOD_FIELDS: Tuple[Tuple[str, FieldShape], ...] = (
    ("id", FieldShape.STRING),
    ("type", FieldShape.STRING),
    ("public_key", FieldShape.PUBLIC_KEY),
)

SERVICE_FIELDS: Tuple[Tuple[str, FieldShape], ...] = (
    ("id", FieldShape.STRING),
    ("type", FieldShape.STRING),
    ("endpoint", FieldShape.STRING),
    ("description", FieldShape.STRING),
)


@dataclass(frozen=True)
class DanglingReference:
    """Relationship entry that names no verification method of the document."""

    field: str
    reference: str


# =============================================================================
# Field access
# =============================================================================


def _lookup(record: Any, name: str, path: str) -> Any:
    if isinstance(record, Mapping):
        value = record.get(name)
    else:
        value = getattr(record, name, None)
    if value is None:
        raise SchemaError.missing_field(path)
    return value


def _coerce_public_key(value: Any, path: str) -> PublicKey:
    if isinstance(value, PublicKey):
        return value
    if isinstance(value, str):
        try:
            return PublicKey.from_base58(value)
        except ValueError:
            raise SchemaError.type_mismatch(path, FieldShape.PUBLIC_KEY.value, value)
    raise SchemaError.type_mismatch(path, FieldShape.PUBLIC_KEY.value, value)


def _check_list(value: Any, path: str, shape: FieldShape) -> List[Any]:
    if not isinstance(value, (list, tuple)):
        raise SchemaError.type_mismatch(path, shape.value, value)
    return list(value)


def _check_record(record: Any, fields, path: str) -> Dict[str, Any]:
    if not isinstance(record, (Mapping, VerificationMethod, ServiceEndpoint)):
        raise SchemaError.type_mismatch(path, "object", record)
    return {
        name: _check_field(_lookup(record, name, f"{path}.{name}"), f"{path}.{name}", shape)
        for name, shape in fields
    }


def _check_field(value: Any, path: str, shape: FieldShape) -> Any:
    """Check one present value against its shape, returning the normalized value."""
    if shape == FieldShape.PUBLIC_KEY:
        return _coerce_public_key(value, path)

    if shape == FieldShape.U32:
        if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= U32_MAX:
            raise SchemaError.type_mismatch(path, shape.value, value)
        return value

    if shape == FieldShape.STRING:
        if not isinstance(value, str):
            raise SchemaError.type_mismatch(path, shape.value, value)
        return value

    items = _check_list(value, path, shape)

    if shape == FieldShape.KEY_LIST:
        return tuple(
            _coerce_public_key(_not_none(item, f"{path}[{i}]"), f"{path}[{i}]")
            for i, item in enumerate(items)
        )

    if shape == FieldShape.STRING_LIST:
        return tuple(
            _check_field(_not_none(item, f"{path}[{i}]"), f"{path}[{i}]", FieldShape.STRING)
            for i, item in enumerate(items)
        )

    if shape == FieldShape.METHOD_LIST:
        return tuple(
            VerificationMethod(**_check_record(item, METHOD_FIELDS, f"{path}[{i}]"))
            for i, item in enumerate(items)
        )

    return tuple(
        ServiceEndpoint(**_check_record(item, SERVICE_FIELDS, f"{path}[{i}]"))
        for i, item in enumerate(items)
    )


def _not_none(value: Any, path: str) -> Any:
    if value is None:
        raise SchemaError.missing_field(path)
    return value


# =============================================================================
# Cross-references
# =============================================================================


def _fragment(reference: str) -> str:
    """Reduce "did:sol:...#key-1" and "#key-1" to "key-1"."""
    return reference.rsplit("#", 1)[-1]


def check_references(document: DidDocument) -> List[DanglingReference]:
    """List relationship entries that match no verification method id.

    Matching is by fragment, so "#default", "default" and
    "did:sol:<id>#default" all reference a method with id "default".
    """
    known = {_fragment(method.id) for method in document.verification_methods}
    dangling = []
    for name in RELATIONSHIP_FIELDS:
        for reference in getattr(document, name):
            if _fragment(reference) not in known:
                dangling.append(DanglingReference(field=name, reference=reference))
    return dangling


# =============================================================================
# Public API
# =============================================================================


def _build_document(record: Any, strict_references: Optional[bool]) -> DidDocument:
    values = {
        name: _check_field(_lookup(record, name, name), name, shape)
        for name, shape in DOCUMENT_FIELDS
    }
    document = DidDocument(**values)

    strict = config.STRICT_REFERENCES if strict_references is None else strict_references
    if strict:
        dangling = check_references(document)
        if dangling:
            raise SchemaError.dangling_reference(dangling[0].field, dangling[0].reference)
    return document


def validate(document: DidDocument, strict_references: Optional[bool] = None) -> DidDocument:
    """Check a document's shape.

    Args:
        document: Decoded (or otherwise assembled) document.
        strict_references: Also reject dangling relationship references.
            Defaults to config.STRICT_REFERENCES.

    Returns:
        The document, unchanged, when it passes. Lists given as Python lists
        are normalized to tuples in a new document.

    Raises:
        SchemaError: SCHEMA_MISSING_FIELD, SCHEMA_TYPE_MISMATCH, or
            SCHEMA_DANGLING_REFERENCE in strict mode.
    """
    if not isinstance(document, DidDocument):
        raise SchemaError.type_mismatch("document", "DidDocument", document)
    checked = _build_document(document, strict_references)
    return document if checked == document else checked


def validate_mapping(data: Any, strict_references: Optional[bool] = None) -> DidDocument:
    """Validate a plain mapping (e.g. parsed JSON) and build a DidDocument.

    Keys are the DidDocument field names. Public keys may be base58 strings;
    verification methods and services are mappings of their field names.

    Raises:
        SchemaError: As for validate.
    """
    if not isinstance(data, Mapping):
        raise SchemaError.type_mismatch("document", "object", data)
    return _build_document(data, strict_references)

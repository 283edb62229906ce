"""did:sol data account decoding.

Account layout (schema version 1), all integers little-endian:

    account                 32 bytes
    authority               32 bytes
    account_version         u32
    doc_version             string
    controllers             vec<32 bytes>
    verification_methods    vec<{id: string, type: string, public_key: 32 bytes}>
    authentication          vec<string>
    capability_invocation   vec<string>
    capability_delegation   vec<string>
    key_agreement           vec<string>
    assertion_method        vec<string>
    services                vec<{id, type, endpoint, description: string}>

This account has been read under several field-name and
nesting conventions. The wire shape here is pinned to one schema version;
a new layout gets its own decode function in DOCUMENT_DECODERS rather than
optional or renamed field reads.
"""

import logging
from typing import Callable, Dict, Optional

from didsol.core.config import ACCOUNT_SCHEMA_VERSION

from .cursor import ByteCursor
from .exceptions import DecodeError
from .models import DidDocument, ServiceEndpoint, VerificationMethod

log = logging.getLogger(__name__)


def _read_verification_method(cursor: ByteCursor) -> VerificationMethod:
    return VerificationMethod(
        id=cursor.read_string(),
        type=cursor.read_string(),
        public_key=cursor.read_public_key(),
    )


def _read_service(cursor: ByteCursor) -> ServiceEndpoint:
    return ServiceEndpoint(
        id=cursor.read_string(),
        type=cursor.read_string(),
        endpoint=cursor.read_string(),
        description=cursor.read_string(),
    )


def _read_string(cursor: ByteCursor) -> str:
    return cursor.read_string()


def _read_public_key(cursor: ByteCursor):
    return cursor.read_public_key()


def read_document_v1(cursor: ByteCursor) -> DidDocument:
    """Read a schema version 1 document from the cursor's current offset.

    Fields are read strictly in declaration order, so a truncated buffer
    always fails at the first field it cuts into.
    """
    # Keyword arguments evaluate left to right, matching wire order.
    return DidDocument(
        account=cursor.read_public_key(),
        authority=cursor.read_public_key(),
        account_version=cursor.read_u32(),
        doc_version=cursor.read_string(),
        controllers=tuple(cursor.read_array(_read_public_key)),
        verification_methods=tuple(cursor.read_array(_read_verification_method)),
        authentication=tuple(cursor.read_array(_read_string)),
        capability_invocation=tuple(cursor.read_array(_read_string)),
        capability_delegation=tuple(cursor.read_array(_read_string)),
        key_agreement=tuple(cursor.read_array(_read_string)),
        assertion_method=tuple(cursor.read_array(_read_string)),
        services=tuple(cursor.read_array(_read_service)),
    )


# Account schema version -> reader
DOCUMENT_DECODERS: Dict[int, Callable[[ByteCursor], DidDocument]] = {
    1: read_document_v1,
}


def read_document(cursor: ByteCursor, schema_version: Optional[int] = None) -> DidDocument:
    """Read a document with the decoder registered for ``schema_version``.

    Args:
        cursor: Cursor positioned at the start of the document.
        schema_version: Layout to decode. Defaults to ACCOUNT_SCHEMA_VERSION.

    Raises:
        DecodeError: UNSUPPORTED_SCHEMA_VERSION for an unregistered version,
            otherwise the first cursor failure.
    """
    version = ACCOUNT_SCHEMA_VERSION if schema_version is None else schema_version
    reader = DOCUMENT_DECODERS.get(version)
    if reader is None:
        raise DecodeError.unsupported_schema_version(version)
    return reader(cursor)


def decode_document(data: bytes, schema_version: Optional[int] = None) -> DidDocument:
    """Decode a did:sol data account.

    Bytes after the last field are ignored: accounts are allocated with
    room to grow, so the tail is normally zero padding.

    Args:
        data: Raw account data.
        schema_version: Layout to decode. Defaults to ACCOUNT_SCHEMA_VERSION.

    Returns:
        The decoded DidDocument.

    Raises:
        DecodeError: BUFFER_UNDERRUN, INVALID_UTF8 or UNSUPPORTED_SCHEMA_VERSION.
    """
    cursor = ByteCursor(data)
    document = read_document(cursor, schema_version)
    log.debug(
        f"decoded did:sol document {document.account} "
        f"({cursor.offset} of {len(data)} bytes used)"
    )
    return document

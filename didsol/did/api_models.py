"""
did:sol decoder result models.

Error codes are the tagged union callers branch on: every failure raised by
the decoder carries one of the ErrorCode strings, and the pipeline reports it
as an ErrorDetail.
"""

from enum import Enum
from typing import Dict, List

from pydantic import BaseModel, Field


# =============================================================================
# Ledger clusters
# =============================================================================

class Cluster(str, Enum):
    """Ledger network a record was fetched from."""
    MAINNET_BETA = "mainnet-beta"
    TESTNET = "testnet"
    DEVNET = "devnet"
    CUSTOM = "custom"          # Locally run, non-production network


# =============================================================================
# Error Models
# =============================================================================

class ErrorDetail(BaseModel):
    """Serializable description of a decode/validation failure."""
    code: str
    message: str
    recoverable: bool


class ErrorCode:
    """Error code registry"""
    # Byte cursor / document decoder
    BUFFER_UNDERRUN = "BUFFER_UNDERRUN"
    INVALID_UTF8 = "INVALID_UTF8"
    UNSUPPORTED_SCHEMA_VERSION = "UNSUPPORTED_SCHEMA_VERSION"

    # Instruction classifier / decoder
    UNKNOWN_OPCODE = "UNKNOWN_OPCODE"
    MISSING_ACCOUNT_KEY = "MISSING_ACCOUNT_KEY"
    EMBEDDED_DECODE_FAILED = "EMBEDDED_DECODE_FAILED"
    NOT_DID_SOL_PROGRAM = "NOT_DID_SOL_PROGRAM"

    # Schema validator
    SCHEMA_MISSING_FIELD = "SCHEMA_MISSING_FIELD"
    SCHEMA_TYPE_MISMATCH = "SCHEMA_TYPE_MISMATCH"
    SCHEMA_DANGLING_REFERENCE = "SCHEMA_DANGLING_REFERENCE"

    # CLI input that is not hex, base64, a readable file or a base58 key
    INPUT_INVALID = "INPUT_INVALID"

    # Anything not raised by the decoder itself
    INTERNAL_ERROR = "INTERNAL_ERROR"


# Decoding the same bytes again gives the same answer, so only
# unclassified failures are worth a retry.
ERROR_RECOVERABILITY: Dict[str, bool] = {
    ErrorCode.BUFFER_UNDERRUN: False,
    ErrorCode.INVALID_UTF8: False,
    ErrorCode.UNSUPPORTED_SCHEMA_VERSION: False,
    ErrorCode.UNKNOWN_OPCODE: False,
    ErrorCode.MISSING_ACCOUNT_KEY: False,
    ErrorCode.EMBEDDED_DECODE_FAILED: False,
    ErrorCode.NOT_DID_SOL_PROGRAM: False,
    ErrorCode.SCHEMA_MISSING_FIELD: False,
    ErrorCode.SCHEMA_TYPE_MISMATCH: False,
    ErrorCode.SCHEMA_DANGLING_REFERENCE: False,
    ErrorCode.INPUT_INVALID: False,
    ErrorCode.INTERNAL_ERROR: True,          # Recoverable
}


# =============================================================================
# Flattened view
# =============================================================================

class FlattenedView(BaseModel):
    """Index-aligned projection of a DID document.

    Nested verification methods and services are spread into parallel lists;
    index i of every verification_* list describes the same method, and
    likewise for service_*. Public keys are base58 strings.
    """
    account: str
    authority: str
    account_version: int
    doc_version: str
    controllers: List[str] = Field(default_factory=list)

    verification_id: List[str] = Field(default_factory=list)
    verification_type: List[str] = Field(default_factory=list)
    verification_public_key: List[str] = Field(default_factory=list)

    authentication: List[str] = Field(default_factory=list)
    capability_invocation: List[str] = Field(default_factory=list)
    capability_delegation: List[str] = Field(default_factory=list)
    key_agreement: List[str] = Field(default_factory=list)
    assertion_method: List[str] = Field(default_factory=list)

    service_id: List[str] = Field(default_factory=list)
    service_type: List[str] = Field(default_factory=list)
    service_endpoint: List[str] = Field(default_factory=list)
    service_description: List[str] = Field(default_factory=list)

"""did:sol account and instruction decoding.

Pipeline: raw bytes -> ByteCursor -> decode_document -> validate -> project.
Instructions: classify_instruction -> decode_instruction.

Usage:
    from didsol.did import decode_document, validate, project

    view = project(validate(decode_document(account_data)))
"""

from .api_models import Cluster, ErrorCode, ErrorDetail, FlattenedView
from .cursor import ByteCursor
from .document import decode_document
from .exceptions import (
    DidSolError,
    DecodeError,
    ClassifyError,
    InstructionError,
    SchemaError,
)
from .instruction import (
    classify_instruction,
    decode_instruction,
    decode_transaction_instruction,
    instruction_title,
    is_did_sol_instruction,
)
from .models import (
    PublicKey,
    VerificationMethod,
    ServiceEndpoint,
    DidDocument,
    InstructionKind,
    InitializeInstruction,
    WriteInstruction,
    CloseAccountInstruction,
    Instruction,
)
from .pipeline import (
    AccountParseResult,
    InstructionParseResult,
    parse_did_account,
    parse_did_instruction,
    should_report_error,
    to_error_detail,
)
from .projector import project
from .validator import DanglingReference, check_references, validate, validate_mapping

__all__ = [
    # Exceptions
    "DidSolError",
    "DecodeError",
    "ClassifyError",
    "InstructionError",
    "SchemaError",
    # Models
    "PublicKey",
    "VerificationMethod",
    "ServiceEndpoint",
    "DidDocument",
    "InstructionKind",
    "InitializeInstruction",
    "WriteInstruction",
    "CloseAccountInstruction",
    "Instruction",
    "Cluster",
    "ErrorCode",
    "ErrorDetail",
    "FlattenedView",
    # Decoding
    "ByteCursor",
    "decode_document",
    "classify_instruction",
    "decode_instruction",
    "decode_transaction_instruction",
    "instruction_title",
    "is_did_sol_instruction",
    # Validation and projection
    "validate",
    "validate_mapping",
    "check_references",
    "DanglingReference",
    "project",
    # Pipeline
    "AccountParseResult",
    "InstructionParseResult",
    "parse_did_account",
    "parse_did_instruction",
    "should_report_error",
    "to_error_detail",
]

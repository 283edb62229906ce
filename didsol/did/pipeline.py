"""Account and instruction parsing entry points for callers.

These wrap decode -> validate -> project so a malformed or foreign record
comes back as an ErrorDetail on the result instead of an exception. What to
do with the error (render a fallback, report it) is the caller's decision;
should_report_error gives the usual reporting policy.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from didsol.core.config import SOL_DID_PROGRAM_ID

from .api_models import (
    ERROR_RECOVERABILITY,
    Cluster,
    ErrorCode,
    ErrorDetail,
    FlattenedView,
)
from .document import decode_document
from .exceptions import DidSolError
from .instruction import KeyLike, as_public_key, decode_transaction_instruction
from .models import DidDocument, Instruction
from .projector import project
from .validator import validate

log = logging.getLogger(__name__)


def to_error_detail(exc: Exception) -> ErrorDetail:
    """Convert an exception to ErrorDetail.

    Extracts error code and message from exception attributes,
    and looks up recoverability from ERROR_RECOVERABILITY mapping.
    """
    code = getattr(exc, "code", ErrorCode.INTERNAL_ERROR)
    message = getattr(exc, "message", str(exc))
    recoverable = ERROR_RECOVERABILITY.get(code, True)
    return ErrorDetail(code=code, message=message, recoverable=recoverable)


def should_report_error(cluster: Cluster) -> bool:
    """Whether a parse failure on ``cluster`` belongs in error reporting.

    Locally run networks hold arbitrary test data, so their failures are noise.
    """
    return Cluster(cluster) != Cluster.CUSTOM


@dataclass(frozen=True)
class AccountParseResult:
    """Outcome of parse_did_account. Exactly one of view/error is set."""

    view: Optional[FlattenedView] = None
    document: Optional[DidDocument] = None
    error: Optional[ErrorDetail] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class InstructionParseResult:
    """Outcome of parse_did_instruction. Exactly one of instruction/error is set."""

    instruction: Optional[Instruction] = None
    error: Optional[ErrorDetail] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def parse_did_account(
    owner: KeyLike,
    data: bytes,
    strict_references: Optional[bool] = None,
) -> AccountParseResult:
    """Decode, validate and project one did:sol data account.

    Never raises.

    Args:
        owner: Owner program of the account.
        data: Raw account data.
        strict_references: Passed to validate.
    """
    try:
        owner_id = str(as_public_key(owner))
        if owner_id != SOL_DID_PROGRAM_ID:
            return AccountParseResult(error=ErrorDetail(
                code=ErrorCode.NOT_DID_SOL_PROGRAM,
                message=f"Account owner {owner_id} is not the did:sol program",
                recoverable=ERROR_RECOVERABILITY[ErrorCode.NOT_DID_SOL_PROGRAM],
            ))
        document = validate(decode_document(data), strict_references=strict_references)
        return AccountParseResult(view=project(document), document=document)
    except DidSolError as e:
        log.info(f"did:sol account rejected: {e.code}: {e.message}", extra={"error_code": e.code})
        return AccountParseResult(error=to_error_detail(e))
    except Exception as e:
        log.exception(f"unexpected failure parsing did:sol account: {e}")
        return AccountParseResult(error=to_error_detail(e))


def parse_did_instruction(
    program_id: KeyLike,
    account_keys: Sequence[KeyLike],
    data: bytes,
) -> InstructionParseResult:
    """Classify and decode one did:sol transaction instruction. Never raises."""
    try:
        instruction = decode_transaction_instruction(program_id, account_keys, data)
        return InstructionParseResult(instruction=instruction)
    except DidSolError as e:
        opcode = data[0] if data else None
        log.info(
            f"did:sol instruction rejected: {e.code}: {e.message}",
            extra={"error_code": e.code, "opcode": opcode},
        )
        return InstructionParseResult(error=to_error_detail(e))
    except Exception as e:
        log.exception(f"unexpected failure parsing did:sol instruction: {e}")
        return InstructionParseResult(error=to_error_detail(e))

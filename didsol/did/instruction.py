"""did:sol instruction classification and decoding.

Instruction data starts with a one-byte opcode. Account keys are mapped
purely by position; signer and writable flags are never consulted.

    opcode 0  Initialize     [funder, data, authority, rent, system]
                             + DID document at INITIALIZE_DOCUMENT_OFFSET
    opcode 1  Write          [data, authority]
    opcode 2  CloseAccount   [data, authority, receiver]
"""

import logging
from typing import Sequence, Union

from didsol.core.config import INITIALIZE_DOCUMENT_OFFSET, SOL_DID_PROGRAM_ID

from .cursor import ByteCursor
from .document import read_document
from .exceptions import ClassifyError, DecodeError, InstructionError
from .models import (
    CloseAccountInstruction,
    InitializeInstruction,
    Instruction,
    InstructionKind,
    PublicKey,
    WriteInstruction,
)

log = logging.getLogger(__name__)

# Account keys each instruction requires, in positional order
ACCOUNT_LAYOUTS = {
    InstructionKind.INITIALIZE: (
        "funder", "data_account", "authority_account", "rent_account", "system_account",
    ),
    InstructionKind.WRITE: ("data_account", "authority_account"),
    InstructionKind.CLOSE_ACCOUNT: ("data_account", "authority_account", "receiver_account"),
}

INSTRUCTION_TITLES = {
    InstructionKind.INITIALIZE: "did:sol Initialize",
    InstructionKind.WRITE: "did:sol Write",
    InstructionKind.CLOSE_ACCOUNT: "did:sol Close Account",
}

KeyLike = Union[PublicKey, str, bytes]


def as_public_key(key: KeyLike) -> PublicKey:
    if isinstance(key, PublicKey):
        return key
    if isinstance(key, str):
        return PublicKey.from_base58(key)
    return PublicKey(bytes(key))


def is_did_sol_instruction(program_id: KeyLike) -> bool:
    """Check whether an instruction targets the did:sol program."""
    return str(as_public_key(program_id)) == SOL_DID_PROGRAM_ID


def instruction_title(kind: InstructionKind) -> str:
    """Display title for an instruction kind, e.g. "did:sol Write"."""
    return INSTRUCTION_TITLES[kind]


def classify_instruction(opcode: Union[int, bytes]) -> InstructionKind:
    """Map an opcode to its instruction kind.

    Args:
        opcode: The opcode byte as an int, or the instruction data itself
            (only the first byte is read).

    Raises:
        ClassifyError: UNKNOWN_OPCODE for any value other than 0, 1, 2,
            or for empty instruction data.
    """
    if isinstance(opcode, (bytes, bytearray, memoryview)):
        if len(opcode) == 0:
            raise ClassifyError(None)
        opcode = opcode[0]
    try:
        return InstructionKind(opcode)
    except ValueError:
        raise ClassifyError(opcode)


def _map_accounts(kind: InstructionKind, account_keys: Sequence[KeyLike]) -> dict:
    roles = ACCOUNT_LAYOUTS[kind]
    if len(account_keys) < len(roles):
        raise InstructionError.missing_account_key(kind.name, len(roles), len(account_keys))
    return {role: as_public_key(key) for role, key in zip(roles, account_keys)}


def decode_instruction(
    kind: InstructionKind,
    account_keys: Sequence[KeyLike],
    data: bytes = b"",
) -> Instruction:
    """Build the typed instruction record for a classified instruction.

    Args:
        kind: Result of classify_instruction, or the raw opcode int.
        account_keys: Instruction account keys, in instruction order.
            Extra keys beyond the layout are ignored.
        data: Full instruction data, opcode byte included. Only Initialize
            reads it.

    Returns:
        InitializeInstruction, WriteInstruction or CloseAccountInstruction.

    Raises:
        InstructionError: MISSING_ACCOUNT_KEY when too few keys are given,
            EMBEDDED_DECODE_FAILED when the Initialize document does not decode.
        ClassifyError: UNKNOWN_OPCODE when ``kind`` is an int naming no instruction.
    """
    kind = classify_instruction(kind)
    accounts = _map_accounts(kind, account_keys)

    if kind == InstructionKind.INITIALIZE:
        cursor = ByteCursor(data)
        try:
            cursor.read_bytes(INITIALIZE_DOCUMENT_OFFSET)
            document = read_document(cursor)
        except DecodeError as e:
            raise InstructionError.embedded_decode_failed(e)
        return InitializeInstruction(initial_document=document, **accounts)

    if kind == InstructionKind.WRITE:
        return WriteInstruction(**accounts)

    return CloseAccountInstruction(**accounts)


def decode_transaction_instruction(
    program_id: KeyLike,
    account_keys: Sequence[KeyLike],
    data: bytes,
) -> Instruction:
    """Check the program, classify and decode one transaction instruction.

    Raises:
        InstructionError: NOT_DID_SOL_PROGRAM, or any decode_instruction failure.
        ClassifyError: UNKNOWN_OPCODE.
    """
    if not is_did_sol_instruction(program_id):
        raise InstructionError.not_did_sol_program(str(as_public_key(program_id)))
    kind = classify_instruction(data)
    log.debug(f"decoding {instruction_title(kind)} with {len(account_keys)} account(s)")
    return decode_instruction(kind, account_keys, data)

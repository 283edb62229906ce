"""did:sol decoder exceptions.

Every exception carries an ErrorCode string in ``code``. The subclasses group
failures by stage (decode, classify, instruction, schema) for ``except``
clauses; callers that need the specific failure branch on ``code``.
"""

from typing import Optional

from .api_models import ErrorCode


class DidSolError(Exception):
    """Base exception for did:sol decoding.

    Carries an error code that maps to ErrorCode constants.
    """

    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(message)


class DecodeError(DidSolError):
    """Byte-level failure while reading an account or payload."""

    def __init__(self, code: str, message: str, offset: Optional[int] = None):
        self.offset = offset
        super().__init__(code, message)

    @classmethod
    def buffer_underrun(cls, needed: int, offset: int, available: int) -> "DecodeError":
        """Factory for BUFFER_UNDERRUN error."""
        return cls(
            code=ErrorCode.BUFFER_UNDERRUN,
            message=(
                f"Buffer underrun at offset {offset}: "
                f"need {needed} bytes, have {available}"
            ),
            offset=offset,
        )

    @classmethod
    def invalid_utf8(cls, offset: int, reason: str) -> "DecodeError":
        """Factory for INVALID_UTF8 error."""
        return cls(
            code=ErrorCode.INVALID_UTF8,
            message=f"Invalid UTF-8 string at offset {offset}: {reason}",
            offset=offset,
        )

    @classmethod
    def unsupported_schema_version(cls, version: int) -> "DecodeError":
        """Factory for UNSUPPORTED_SCHEMA_VERSION error."""
        return cls(
            code=ErrorCode.UNSUPPORTED_SCHEMA_VERSION,
            message=f"No decoder registered for account schema version {version}",
        )


class ClassifyError(DidSolError):
    """Instruction opcode does not name a known instruction."""

    def __init__(self, opcode: Optional[int]):
        self.opcode = opcode
        if opcode is None:
            message = "Instruction data is empty, no opcode byte"
        else:
            message = f"Unknown did:sol instruction opcode: {opcode}"
        super().__init__(ErrorCode.UNKNOWN_OPCODE, message)


class InstructionError(DidSolError):
    """Instruction could not be mapped onto its typed record."""

    def __init__(self, code: str, message: str, cause: Optional[DidSolError] = None):
        self.cause = cause
        super().__init__(code, message)

    @property
    def cause_code(self) -> Optional[str]:
        """Error code of the wrapped decode failure, if any."""
        return self.cause.code if self.cause is not None else None

    @classmethod
    def missing_account_key(cls, kind: str, required: int, supplied: int) -> "InstructionError":
        """Factory for MISSING_ACCOUNT_KEY error."""
        return cls(
            code=ErrorCode.MISSING_ACCOUNT_KEY,
            message=f"{kind} needs {required} account keys, got {supplied}",
        )

    @classmethod
    def embedded_decode_failed(cls, cause: DecodeError) -> "InstructionError":
        """Factory for EMBEDDED_DECODE_FAILED error.

        The decode failure is kept in ``cause`` so its code and offset
        remain inspectable.
        """
        return cls(
            code=ErrorCode.EMBEDDED_DECODE_FAILED,
            message=f"Embedded DID document failed to decode: {cause.message}",
            cause=cause,
        )

    @classmethod
    def not_did_sol_program(cls, program_id: str) -> "InstructionError":
        """Factory for NOT_DID_SOL_PROGRAM error."""
        return cls(
            code=ErrorCode.NOT_DID_SOL_PROGRAM,
            message=f"Program {program_id} is not the did:sol program",
        )


class SchemaError(DidSolError):
    """Assembled record does not have the expected shape."""

    def __init__(self, code: str, message: str, field: str):
        self.field = field
        super().__init__(code, message)

    @classmethod
    def missing_field(cls, field: str) -> "SchemaError":
        """Factory for SCHEMA_MISSING_FIELD error."""
        return cls(
            code=ErrorCode.SCHEMA_MISSING_FIELD,
            message=f"Required field '{field}' is missing",
            field=field,
        )

    @classmethod
    def type_mismatch(cls, field: str, expected: str, actual: object) -> "SchemaError":
        """Factory for SCHEMA_TYPE_MISMATCH error."""
        return cls(
            code=ErrorCode.SCHEMA_TYPE_MISMATCH,
            message=(
                f"Field '{field}' must be {expected}, "
                f"got {type(actual).__name__}"
            ),
            field=field,
        )

    @classmethod
    def dangling_reference(cls, field: str, reference: str) -> "SchemaError":
        """Factory for SCHEMA_DANGLING_REFERENCE error."""
        return cls(
            code=ErrorCode.SCHEMA_DANGLING_REFERENCE,
            message=(
                f"'{field}' references '{reference}', "
                f"which is not a verification method of this document"
            ),
            field=field,
        )

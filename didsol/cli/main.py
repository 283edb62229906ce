"""did:sol decoding commands.

Commands:
    didsol decode <account-data>        Decode, validate and flatten an account
    didsol instruction <ix-data> -a K   Classify and decode an instruction
    didsol config                       Show effective configuration
"""

import logging
from typing import List, Optional

import typer

from didsol.core.config import SOL_DID_PROGRAM_ID, get_config_summary
from didsol.did import (
    DecodeError,
    DidSolError,
    ErrorCode,
    SchemaError,
    check_references,
    decode_document,
    decode_transaction_instruction,
    instruction_title,
    project,
    validate,
)
from didsol.did.instruction import as_public_key
from didsol.logging_config import configure_logging

from .output import OutputFormat, output, output_error
from .utils import (
    EXIT_PARSE_ERROR,
    EXIT_VALIDATION_FAILURE,
    InputEncoding,
    dataclass_to_dict,
    read_bytes_input,
)

log = logging.getLogger(__name__)

app = typer.Typer(
    name="didsol",
    help="Decode did:sol ledger accounts and instructions.",
    no_args_is_help=True,
)


def _read_or_fail(source: str, encoding: InputEncoding) -> bytes:
    try:
        return read_bytes_input(source, encoding)
    except ValueError as e:
        output_error(code=ErrorCode.INPUT_INVALID, message=str(e), exit_code=EXIT_PARSE_ERROR)


@app.command("decode")
def decode_cmd(
    source: str = typer.Argument(
        ...,
        help="Account data as hex/base64, a file path, or '-' for stdin",
    ),
    encoding: InputEncoding = typer.Option(
        InputEncoding.auto,
        "--encoding",
        "-e",
        help="How to read SOURCE",
    ),
    owner: Optional[str] = typer.Option(
        None,
        "--owner",
        help="Account owner program; rejected unless it is the did:sol program",
    ),
    strict: Optional[bool] = typer.Option(
        None,
        "--strict/--no-strict",
        help=(
            "Reject relationship entries that name no verification method "
            "[default: DIDSOL_STRICT_REFERENCES]"
        ),
    ),
    format: OutputFormat = typer.Option(
        OutputFormat.json,
        "--format",
        "-f",
        help="Output format",
    ),
) -> None:
    """Decode a did:sol data account and print its flattened view.

    Examples:
        didsol decode account.bin
        didsol decode 0a1b2c... --strict
        solana account <addr> --output json | jq -r '.account.data[0]' | didsol decode - -e base64
    """
    data = _read_or_fail(source, encoding)
    log.debug(f"decoding {len(data)} bytes of account data")

    if owner is not None and owner != SOL_DID_PROGRAM_ID:
        output_error(
            code=ErrorCode.NOT_DID_SOL_PROGRAM,
            message=f"Account owner {owner} is not the did:sol program",
            exit_code=EXIT_VALIDATION_FAILURE,
        )

    try:
        document = decode_document(data)
    except DecodeError as e:
        output_error(code=e.code, message=e.message, exit_code=EXIT_PARSE_ERROR)

    try:
        document = validate(document, strict_references=strict)
    except SchemaError as e:
        output_error(code=e.code, message=e.message, exit_code=EXIT_VALIDATION_FAILURE)

    result = project(document).model_dump()
    result["warnings"] = [
        f"{d.field} references unknown verification method '{d.reference}'"
        for d in check_references(document)
    ]
    output(result, format)


@app.command("instruction")
def instruction_cmd(
    source: str = typer.Argument(
        ...,
        help="Instruction data as hex/base64, a file path, or '-' for stdin",
    ),
    accounts: List[str] = typer.Option(
        [],
        "--account",
        "-a",
        help="Instruction account key (base58), repeat in instruction order",
    ),
    program_id: str = typer.Option(
        SOL_DID_PROGRAM_ID,
        "--program-id",
        help="Program the instruction was sent to",
    ),
    encoding: InputEncoding = typer.Option(
        InputEncoding.auto,
        "--encoding",
        "-e",
        help="How to read SOURCE",
    ),
    format: OutputFormat = typer.Option(
        OutputFormat.json,
        "--format",
        "-f",
        help="Output format",
    ),
) -> None:
    """Classify and decode a did:sol instruction.

    Examples:
        didsol instruction 01 -a <data-account> -a <authority>
        didsol instruction ix.bin -e raw -a K1 -a K2 -a K3 -a K4 -a K5
    """
    data = _read_or_fail(source, encoding)

    try:
        for key in [program_id, *accounts]:
            as_public_key(key)
    except ValueError as e:
        output_error(code=ErrorCode.INPUT_INVALID, message=f"Invalid public key: {e}", exit_code=EXIT_PARSE_ERROR)

    try:
        instruction = decode_transaction_instruction(program_id, accounts, data)
    except DidSolError as e:
        output_error(code=e.code, message=e.message, exit_code=EXIT_PARSE_ERROR)

    result = {"title": instruction_title(instruction.kind), **dataclass_to_dict(instruction)}
    output(result, format)


@app.command("config")
def config_cmd(
    format: OutputFormat = typer.Option(
        OutputFormat.json,
        "--format",
        "-f",
        help="Output format",
    ),
) -> None:
    """Show the decoder's effective configuration."""
    output(get_config_summary(), format)


def run() -> None:
    """Console script entry point."""
    configure_logging()
    app()


if __name__ == "__main__":
    run()

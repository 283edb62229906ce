"""
Tests for the didsol command line.

Exit codes:
- 0 success
- 2 input could not be read or decoded
- 3 decoded record failed validation
"""

import base64
import json
from dataclasses import replace

import pytest
from typer.testing import CliRunner

from didsol.cli.main import app
from didsol.cli.utils import (
    EXIT_PARSE_ERROR,
    EXIT_SUCCESS,
    EXIT_VALIDATION_FAILURE,
    InputEncoding,
    read_bytes_input,
)
from didsol.core import config
from didsol.core.config import SOL_DID_PROGRAM_ID
from didsol.did.api_models import ErrorCode
from tests.fixtures.documents import encode_document, encode_initialize, make_key


@pytest.fixture
def runner():
    return CliRunner()


def _json(result) -> dict:
    return json.loads(result.stdout)


class TestDecodeCommand:
    """Tests for `didsol decode`."""

    def test_hex_literal(self, runner, document, encoded):
        assert len(encoded.hex()) > 255
        result = runner.invoke(app, ["decode", encoded.hex()])
        assert result.exit_code == EXIT_SUCCESS
        body = _json(result)
        assert body["account"] == str(document.account)
        assert body["verification_id"] == ["default", "key-2"]
        assert body["service_endpoint"][2] == "https://例え.jp"
        assert body["warnings"] == []

    def test_base64_literal(self, runner, encoded):
        text = base64.b64encode(encoded).decode()
        result = runner.invoke(app, ["decode", text, "--encoding", "base64"])
        assert result.exit_code == EXIT_SUCCESS
        assert _json(result)["doc_version"] == "1.0"

    def test_raw_file(self, runner, tmp_path, encoded):
        path = tmp_path / "account.bin"
        path.write_bytes(encoded)
        result = runner.invoke(app, ["decode", str(path)])
        assert result.exit_code == EXIT_SUCCESS
        assert _json(result)["account_version"] == 1

    def test_stdin(self, runner, encoded):
        result = runner.invoke(app, ["decode", "-"], input=encoded.hex() + "\n")
        assert result.exit_code == EXIT_SUCCESS

    def test_truncated(self, runner, encoded):
        result = runner.invoke(app, ["decode", encoded[:-3].hex()])
        assert result.exit_code == EXIT_PARSE_ERROR
        assert _json(result)["error"]["code"] == "BUFFER_UNDERRUN"

    def test_unreadable_input(self, runner):
        result = runner.invoke(app, ["decode", "zz!!"])
        assert result.exit_code == EXIT_PARSE_ERROR
        assert _json(result)["error"]["code"] == ErrorCode.INPUT_INVALID

    def test_dangling_reference_warns(self, runner, document):
        data = encode_document(replace(document, authentication=("#nope",)))
        result = runner.invoke(app, ["decode", data.hex()])
        assert result.exit_code == EXIT_SUCCESS
        assert _json(result)["warnings"] == [
            "authentication references unknown verification method '#nope'"
        ]

    def test_dangling_reference_strict(self, runner, document):
        data = encode_document(replace(document, authentication=("#nope",)))
        result = runner.invoke(app, ["decode", data.hex(), "--strict"])
        assert result.exit_code == EXIT_VALIDATION_FAILURE
        assert _json(result)["error"]["code"] == "SCHEMA_DANGLING_REFERENCE"

    def test_strict_default_from_config(self, runner, document, monkeypatch):
        """Without --strict, DIDSOL_STRICT_REFERENCES decides."""
        monkeypatch.setattr(config, "STRICT_REFERENCES", True)
        data = encode_document(replace(document, authentication=("#nope",)))
        result = runner.invoke(app, ["decode", data.hex()])
        assert result.exit_code == EXIT_VALIDATION_FAILURE
        assert _json(result)["error"]["code"] == ErrorCode.SCHEMA_DANGLING_REFERENCE

    def test_no_strict_overrides_config(self, runner, document, monkeypatch):
        monkeypatch.setattr(config, "STRICT_REFERENCES", True)
        data = encode_document(replace(document, authentication=("#nope",)))
        result = runner.invoke(app, ["decode", data.hex(), "--no-strict"])
        assert result.exit_code == EXIT_SUCCESS
        assert len(_json(result)["warnings"]) == 1

    def test_owner(self, runner, encoded):
        ok = runner.invoke(app, ["decode", encoded.hex(), "--owner", SOL_DID_PROGRAM_ID])
        assert ok.exit_code == EXIT_SUCCESS

        foreign = runner.invoke(app, ["decode", encoded.hex(), "--owner", str(make_key(7))])
        assert foreign.exit_code == EXIT_VALIDATION_FAILURE
        assert _json(foreign)["error"]["code"] == ErrorCode.NOT_DID_SOL_PROGRAM

    def test_pretty_format(self, runner, document, encoded):
        result = runner.invoke(app, ["decode", encoded.hex(), "-f", "pretty"])
        assert result.exit_code == EXIT_SUCCESS
        assert f"account: {document.account}" in result.stdout
        assert "capability_delegation: -" in result.stdout


class TestInstructionCommand:
    """Tests for `didsol instruction`."""

    def test_write(self, runner):
        a, b = str(make_key(1)), str(make_key(2))
        result = runner.invoke(app, ["instruction", "01", "-a", a, "-a", b])
        assert result.exit_code == EXIT_SUCCESS
        assert _json(result) == {
            "title": "did:sol Write",
            "kind": "WRITE",
            "data_account": a,
            "authority_account": b,
        }

    def test_initialize(self, runner, document, account_keys):
        args = ["instruction", encode_initialize(document).hex()]
        for key in account_keys:
            args += ["-a", str(key)]
        result = runner.invoke(app, args)
        assert result.exit_code == EXIT_SUCCESS
        body = _json(result)
        assert body["kind"] == "INITIALIZE"
        assert body["funder"] == str(account_keys[0])
        assert body["initial_document"]["doc_version"] == "1.0"
        assert body["initial_document"]["verification_methods"][0]["id"] == "default"

    def test_unknown_opcode(self, runner):
        result = runner.invoke(app, ["instruction", "05"])
        assert result.exit_code == EXIT_PARSE_ERROR
        assert _json(result)["error"]["code"] == "UNKNOWN_OPCODE"

    def test_missing_accounts(self, runner):
        result = runner.invoke(app, ["instruction", "02", "-a", str(make_key(1))])
        assert result.exit_code == EXIT_PARSE_ERROR
        assert _json(result)["error"]["code"] == "MISSING_ACCOUNT_KEY"

    def test_foreign_program(self, runner):
        result = runner.invoke(app, ["instruction", "01", "--program-id", str(make_key(9))])
        assert result.exit_code == EXIT_PARSE_ERROR
        assert _json(result)["error"]["code"] == ErrorCode.NOT_DID_SOL_PROGRAM

    def test_invalid_account_key(self, runner):
        result = runner.invoke(app, ["instruction", "01", "-a", "notakey!", "-a", "x"])
        assert result.exit_code == EXIT_PARSE_ERROR
        assert _json(result)["error"]["code"] == ErrorCode.INPUT_INVALID


class TestConfigCommand:
    """Tests for `didsol config`."""

    def test_config(self, runner):
        result = runner.invoke(app, ["config"])
        assert result.exit_code == EXIT_SUCCESS
        assert _json(result)["normative"]["sol_did_program_id"] == SOL_DID_PROGRAM_ID


class TestReadBytesInput:
    """Tests for literal / file / stdin input handling."""

    def test_literal_longer_than_filename_limit(self, encoded):
        text = encoded.hex()
        assert len(text) > 255
        assert read_bytes_input(text) == encoded

    def test_long_base64_literal(self, encoded):
        text = base64.b64encode(encoded * 4).decode()
        assert len(text) > 255
        assert read_bytes_input(text, InputEncoding.base64) == encoded * 4

    def test_short_literal(self):
        assert read_bytes_input("0x0a0b") == b"\x0a\x0b"

    def test_file_read_raw(self, tmp_path):
        path = tmp_path / "data.bin"
        path.write_bytes(b"\x00\xff")
        assert read_bytes_input(str(path)) == b"\x00\xff"

    def test_file_read_as_hex(self, tmp_path):
        path = tmp_path / "data.hex"
        path.write_text("00ff\n")
        assert read_bytes_input(str(path), InputEncoding.hex) == b"\x00\xff"

    def test_undecodable_literal(self):
        with pytest.raises(ValueError):
            read_bytes_input("zz!!")

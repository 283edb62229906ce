"""
did:sol decoder configuration constants.

Constants are organized into:
- NORMATIVE: Fixed by the on-chain program layout, cannot change without a new
  account schema version
- OPERATIONAL: Deployment-specific settings (env vars)
"""

import os

# =============================================================================
# NORMATIVE CONSTANTS (fixed by the program's account layout)
# =============================================================================

# Width of a ledger public key / account address in bytes
PUBLIC_KEY_LENGTH: int = 32

# Width of the little-endian length and count headers
LENGTH_PREFIX_SIZE: int = 4

# Account layout revision this decoder reads.
# A changed wire shape gets a new number and a new decode function,
# registered in didsol.did.document.DOCUMENT_DECODERS.
ACCOUNT_SCHEMA_VERSION: int = 1

# Byte offset of the embedded DID document inside Initialize instruction data:
# 1 opcode byte followed by 8 bytes whose meaning is not documented by the
# program (possibly a u64 size/rent hint or a bump seed with padding).
# The bytes are skipped, never interpreted.
INITIALIZE_DOCUMENT_OFFSET: int = 9

# Owner program of did:sol data accounts
SOL_DID_PROGRAM_ID: str = "idDa4XeCjVwKcprVAo812coUQbovSZ4kDGJf2sPaBnM"

# =============================================================================
# OPERATIONAL SETTINGS (deployment-specific, via environment variables)
# =============================================================================

# Reject documents whose relationship lists reference verification method ids
# not present in the document. Default is permissive: relationships may point
# at key material defined outside the account.
STRICT_REFERENCES: bool = os.getenv("DIDSOL_STRICT_REFERENCES", "false").lower() == "true"


def get_config_summary() -> dict:
    """Return the effective configuration for diagnostics."""
    return {
        "normative": {
            "public_key_length": PUBLIC_KEY_LENGTH,
            "length_prefix_size": LENGTH_PREFIX_SIZE,
            "account_schema_version": ACCOUNT_SCHEMA_VERSION,
            "initialize_document_offset": INITIALIZE_DOCUMENT_OFFSET,
            "sol_did_program_id": SOL_DID_PROGRAM_ID,
        },
        "operational": {
            "strict_references": STRICT_REFERENCES,
        },
    }

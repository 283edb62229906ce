"""did:sol account and instruction models.

All records are frozen and hold their own copies of decoded data; nothing
refers back to the buffer they were read from.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Tuple, Union

import base58

from didsol.core.config import PUBLIC_KEY_LENGTH


@dataclass(frozen=True)
class PublicKey:
    """32-byte ledger public key / account address.

    Renders in base58, the form used for ledger addresses.
    """

    raw: bytes

    def __post_init__(self):
        if len(self.raw) != PUBLIC_KEY_LENGTH:
            raise ValueError(
                f"Public key must be {PUBLIC_KEY_LENGTH} bytes, got {len(self.raw)}"
            )
        object.__setattr__(self, "raw", bytes(self.raw))

    @classmethod
    def from_base58(cls, value: str) -> "PublicKey":
        """Parse a base58 address string.

        Raises:
            ValueError: If the string is not base58 or not 32 bytes long.
        """
        return cls(base58.b58decode(value))

    def to_base58(self) -> str:
        return base58.b58encode(self.raw).decode("ascii")

    def __str__(self) -> str:
        return self.to_base58()


@dataclass(frozen=True)
class VerificationMethod:
    """Key material entry of a DID document.

    Attributes:
        id: Method identifier, usually a fragment such as "default".
        type: Key type tag, e.g. "Ed25519VerificationKey2018".
        public_key: The method's 32-byte key.
    """

    id: str
    type: str
    public_key: PublicKey


@dataclass(frozen=True)
class ServiceEndpoint:
    """Service entry of a DID document."""

    id: str
    type: str
    endpoint: str
    description: str


@dataclass(frozen=True)
class DidDocument:
    """Decoded did:sol data account.

    Attributes:
        account: Address of the data account itself.
        authority: Key allowed to update the account.
        account_version: On-chain storage layout version.
        doc_version: Free-form document schema tag.
        controllers: Additional controller keys, in storage order.
        verification_methods: Key material entries.
        authentication, capability_invocation, capability_delegation,
        key_agreement, assertion_method: Verification relationship lists.
            Entries are meant to name verification method ids; this is not
            enforced (see didsol.did.validator.check_references).
        services: Service endpoints.
    """

    account: PublicKey
    authority: PublicKey
    account_version: int
    doc_version: str
    controllers: Tuple[PublicKey, ...] = ()
    verification_methods: Tuple[VerificationMethod, ...] = ()
    authentication: Tuple[str, ...] = ()
    capability_invocation: Tuple[str, ...] = ()
    capability_delegation: Tuple[str, ...] = ()
    key_agreement: Tuple[str, ...] = ()
    assertion_method: Tuple[str, ...] = ()
    services: Tuple[ServiceEndpoint, ...] = ()


# Relationship lists, in wire order
RELATIONSHIP_FIELDS: Tuple[str, ...] = (
    "authentication",
    "capability_invocation",
    "capability_delegation",
    "key_agreement",
    "assertion_method",
)


class InstructionKind(IntEnum):
    """did:sol instruction variants, valued by their opcode byte."""

    INITIALIZE = 0
    WRITE = 1
    CLOSE_ACCOUNT = 2


@dataclass(frozen=True)
class InitializeInstruction:
    """Create a data account holding ``initial_document``."""

    funder: PublicKey
    data_account: PublicKey
    authority_account: PublicKey
    rent_account: PublicKey
    system_account: PublicKey
    initial_document: DidDocument

    kind = InstructionKind.INITIALIZE


@dataclass(frozen=True)
class WriteInstruction:
    """Overwrite a data account's document."""

    data_account: PublicKey
    authority_account: PublicKey

    kind = InstructionKind.WRITE


@dataclass(frozen=True)
class CloseAccountInstruction:
    """Close a data account, sending its lamports to ``receiver_account``."""

    data_account: PublicKey
    authority_account: PublicKey
    receiver_account: PublicKey

    kind = InstructionKind.CLOSE_ACCOUNT


Instruction = Union[InitializeInstruction, WriteInstruction, CloseAccountInstruction]

"""Identity Generator — fresh address-shaped identifiers for new records.

Invariants:
    - new_record_id() never depends on caller input and never touches the network
    - Output is an EIP-55 checksummed 20-byte address ("0x" + 40 hex chars)
    - is_record_id() is the single identifier-shape predicate used for path
      parameters and reference fields

Design Decisions:
    - Address shape over UUID: record ids double as marker-transfer recipients
      for the blockchain outbox
    - os.urandom over keypair generation: a marker recipient needs no private key
"""

import os

from web3 import Web3

from rice_supply.core.domain_types import RecordId

_ADDRESS_BYTES = 20


def new_record_id() -> RecordId:
    """Return a fresh checksummed address string."""
    return RecordId(Web3.to_checksum_address(os.urandom(_ADDRESS_BYTES)))


def is_record_id(value: object) -> bool:
    """True if value is a well-formed hex address string."""
    if not isinstance(value, str) or not value.startswith("0x"):
        return False
    return Web3.is_address(value)

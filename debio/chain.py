"""Shared runtime primitives: origins, events, encoding and hashing."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from typing import Any, Union

AccountId = Union[str, bytes]

U64_MODULUS = 1 << 64


class PalletError(Exception):
    """Base class for every error a pallet reports."""


class BadOrigin(PalletError):
    """The call was not signed by an account."""


@dataclass(frozen=True)
class Event:
    """An event deposited by a pallet: a name and its parameters."""

    name: str
    args: tuple[Any, ...] = ()


class Pallet:
    """Base for pallets: keeps the events they deposit, oldest first."""

    def __init__(self) -> None:
        self.events: list[Event] = []

    def deposit_event(self, name: str, *args: Any) -> Event:
        """Record an event and return it."""
        event = Event(name, tuple(args))
        self.events.append(event)
        return event


def ensure_signed(origin: AccountId | None) -> AccountId:
    """Return the signing account, or raise BadOrigin for an unsigned origin."""
    if origin is None:
        raise BadOrigin("origin must be a signed account")
    return origin


def encode_u64(value: int) -> bytes:
    """Encode an unsigned 64-bit integer as eight little-endian bytes."""
    if not 0 <= value < U64_MODULUS:
        raise ValueError(f"value {value} does not fit in an unsigned 64-bit integer")
    return value.to_bytes(8, "little")


def encode_account(account_id: AccountId) -> bytes:
    """Encode an account id: bytes as they are, text as UTF-8."""
    if isinstance(account_id, bytes):
        return account_id
    return account_id.encode("utf-8")


def blake2_256(data: bytes) -> bytes:
    """Return the 32-byte BLAKE2b digest of data."""
    return hashlib.blake2b(data, digest_size=32).digest()


def generate_id(owner_id: AccountId, count: int) -> bytes:
    """Derive an item id from its owner and the owner's item count."""
    return blake2_256(encode_account(owner_id) + encode_u64(count))


def wrapping_add(value: int) -> int:
    """Add one, wrapping around at the unsigned 64-bit limit."""
    return (value + 1) % U64_MODULUS


def wrapping_sub(value: int) -> int:
    """Subtract one, wrapping around at zero like an unsigned 64-bit integer."""
    return (value - 1) % U64_MODULUS
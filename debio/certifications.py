"""Certifications owned by accounts, with per-owner and global counts."""

from __future__ import annotations

import dataclasses
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from debio.chain import (
    AccountId,
    Pallet,
    PalletError,
    ensure_signed,
    generate_id,
    wrapping_add,
    wrapping_sub,
)


class CertificationError(PalletError):
    """Base class for certification errors."""


class NotAllowedToCreate(CertificationError):
    """The account is not allowed to create certifications."""


class NotCertificationOwner(CertificationError):
    """The account does not own the certification."""


class CertificationDoesNotExist(CertificationError):
    """No certification has the given id."""


@dataclass(frozen=True)
class CertificationInfo:
    """The part of a certification its owner may change."""

    title: bytes = b""
    issuer: bytes = b""
    month: bytes = b""
    year: bytes = b""
    description: bytes = b""


@dataclass(frozen=True)
class Certification:
    """A stored certification."""

    id: bytes
    owner_id: AccountId
    info: CertificationInfo


class CertificationOwner(ABC):
    """The party that decides who may own certifications and tracks them."""

    @abstractmethod
    def can_create_certification(self, user_id: AccountId) -> bool:
        """Whether the account may create a certification."""

    @abstractmethod
    def get_owner(self, owner_id: AccountId) -> Any | None:
        """Return the owner record for the account, or None."""

    @abstractmethod
    def associate(self, owner_id: AccountId, certification_id: bytes) -> None:
        """Attach a certification to its owner."""

    @abstractmethod
    def disassociate(self, owner_id: AccountId, certification_id: bytes) -> None:
        """Detach a certification from its owner."""


class CertificationsPallet(Pallet):
    """Creates, updates and deletes certifications."""

    def __init__(self, owner: CertificationOwner) -> None:
        super().__init__()
        self._owner = owner
        self._certifications: dict[bytes, Certification] = {}
        self._count: int | None = None
        self._count_by_owner: dict[AccountId, int] = {}

    def generate_certification_id(self, owner_id: AccountId, certification_count: int) -> bytes:
        """Derive the id of an owner's certification from their count."""
        return generate_id(owner_id, certification_count)

    def create_certification(self, origin: AccountId | None, info: CertificationInfo) -> Certification:
        """Create a certification for the signing account."""
        who = ensure_signed(origin)
        if not self._owner.can_create_certification(who):
            raise NotAllowedToCreate(f"{who!r} may not create certifications")

        certification_id = self.generate_certification_id(
            who, self.certification_count_by_owner(who)
        )
        certification = Certification(certification_id, who, info)
        self._certifications[certification_id] = certification

        self._count = wrapping_add(self._count or 0)
        self._count_by_owner[who] = wrapping_add(self._count_by_owner.get(who, 0))
        self._owner.associate(who, certification_id)

        self.deposit_event("CertificationCreated", certification, who)
        return certification

    def _owned(self, who: AccountId, certification_id: bytes) -> Certification:
        certification = self._certifications.get(certification_id)
        if certification is None:
            raise CertificationDoesNotExist(certification_id.hex())
        if certification.owner_id != who:
            raise NotCertificationOwner(f"{who!r} does not own {certification_id.hex()}")
        return certification

    def update_certification(
        self, origin: AccountId | None, certification_id: bytes, info: CertificationInfo
    ) -> Certification:
        """Replace the information of a certification the caller owns."""
        who = ensure_signed(origin)
        certification = dataclasses.replace(self._owned(who, certification_id), info=info)
        self._certifications[certification_id] = certification
        self.deposit_event("CertificationUpdated", certification, who)
        return certification

    def delete_certification(
        self, origin: AccountId | None, certification_id: bytes, *, emit_event: bool = True
    ) -> Certification:
        """Delete a certification the caller owns and detach it from the owner."""
        who = ensure_signed(origin)
        self._owned(who, certification_id)
        if self._owner.get_owner(who) is None:
            raise LookupError(f"no owner record for {who!r}")

        certification = self._certifications.pop(certification_id)
        self._owner.disassociate(who, certification.id)
        self._count = wrapping_sub(1 if self._count is None else self._count)
        self._count_by_owner[who] = wrapping_sub(self._count_by_owner.get(who, 1))

        if emit_event:
            self.deposit_event("CertificationDeleted", certification, who)
        return certification

    def certification_by_id(self, certification_id: bytes) -> Certification | None:
        """Return the certification with the given id, or None."""
        return self._certifications.get(certification_id)

    def certification_count_by_owner(self, owner_id: AccountId) -> int:
        """Number of certifications the account owns."""
        return self._count_by_owner.get(owner_id, 0)

    def certifications_count(self) -> int:
        """Number of certifications in total."""
        return self._count or 0
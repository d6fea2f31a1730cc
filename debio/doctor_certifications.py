"""Certifications owned by doctors, with per-owner and global counts."""

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


class DoctorCertificationError(PalletError):
    """Base class for doctor certification errors."""


class NotAllowedToCreate(DoctorCertificationError):
    """The account is not allowed to create doctor certifications."""


class NotDoctorCertificationOwner(DoctorCertificationError):
    """The account does not own the doctor certification."""


class DoctorCertificationDoesNotExist(DoctorCertificationError):
    """No doctor certification has the given id."""


@dataclass(frozen=True)
class DoctorCertificationInfo:
    """The part of a doctor certification its owner may change."""

    title: bytes = b""
    issuer: bytes = b""
    month: bytes = b""
    year: bytes = b""
    description: bytes = b""


@dataclass(frozen=True)
class DoctorCertification:
    """A stored doctor certification."""

    id: bytes
    owner_id: AccountId
    info: DoctorCertificationInfo


class DoctorCertificationOwner(ABC):
    """The party that decides who may own doctor certifications and tracks them."""

    @abstractmethod
    def can_create_certification(self, user_id: AccountId) -> bool:
        """Whether the account may create a doctor certification."""

    @abstractmethod
    def get_owner(self, owner_id: AccountId) -> Any | None:
        """Return the owner record for the account, or None."""

    @abstractmethod
    def associate(self, owner_id: AccountId, certification_id: bytes) -> None:
        """Attach a certification to its owner."""

    @abstractmethod
    def disassociate(self, owner_id: AccountId, certification_id: bytes) -> None:
        """Detach a certification from its owner."""


class DoctorCertificationsPallet(Pallet):
    """Creates, updates and deletes doctor certifications."""

    def __init__(self, owner: DoctorCertificationOwner) -> None:
        super().__init__()
        self._owner = owner
        self._certifications: dict[bytes, DoctorCertification] = {}
        self._count: int | None = None
        self._count_by_owner: dict[AccountId, int] = {}

    def generate_certification_id(self, owner_id: AccountId, certification_count: int) -> bytes:
        """Derive the id of an owner's certification from their count."""
        return generate_id(owner_id, certification_count)

    def create_certification(
        self, origin: AccountId | None, info: DoctorCertificationInfo
    ) -> DoctorCertification:
        """Create a doctor certification for the signing account."""
        who = ensure_signed(origin)
        if not self._owner.can_create_certification(who):
            raise NotAllowedToCreate(f"{who!r} may not create doctor certifications")

        certification_id = self.generate_certification_id(
            who, self.certification_count_by_owner(who)
        )
        certification = DoctorCertification(certification_id, who, info)
        self._certifications[certification_id] = certification

        self._count = wrapping_add(self._count or 0)
        self._count_by_owner[who] = wrapping_add(self._count_by_owner.get(who, 0))
        self._owner.associate(who, certification_id)

        self.deposit_event("DoctorCertificationCreated", certification, who)
        return certification

    def _owned(self, who: AccountId, certification_id: bytes) -> DoctorCertification:
        certification = self._certifications.get(certification_id)
        if certification is None:
            raise DoctorCertificationDoesNotExist(certification_id.hex())
        if certification.owner_id != who:
            raise NotDoctorCertificationOwner(
                f"{who!r} does not own {certification_id.hex()}"
            )
        return certification

    def update_certification(
        self,
        origin: AccountId | None,
        certification_id: bytes,
        info: DoctorCertificationInfo,
    ) -> DoctorCertification:
        """Replace the information of a doctor certification the caller owns."""
        who = ensure_signed(origin)
        certification = dataclasses.replace(self._owned(who, certification_id), info=info)
        self._certifications[certification_id] = certification
        self.deposit_event("DoctorCertificationUpdated", certification, who)
        return certification

    def delete_certification(
        self, origin: AccountId | None, certification_id: bytes, *, emit_event: bool = True
    ) -> DoctorCertification:
        """Delete a doctor certification the caller owns and detach it from the owner."""
        who = ensure_signed(origin)
        self._owned(who, certification_id)
        if self._owner.get_owner(who) is None:
            raise LookupError(f"no owner record for {who!r}")

        certification = self._certifications.pop(certification_id)
        self._owner.disassociate(who, certification.id)
        self._count = wrapping_sub(1 if self._count is None else self._count)
        self._count_by_owner[who] = wrapping_sub(self._count_by_owner.get(who, 1))

        if emit_event:
            self.deposit_event("DoctorCertificationDeleted", certification, who)
        return certification

    def certification_by_id(self, certification_id: bytes) -> DoctorCertification | None:
        """Return the doctor certification with the given id, or None."""
        return self._certifications.get(certification_id)

    def certification_count_by_owner(self, owner_id: AccountId) -> int:
        """Number of doctor certifications the account owns."""
        return self._count_by_owner.get(owner_id, 0)

    def certifications_count(self) -> int:
        """Number of doctor certifications in total."""
        return self._count or 0
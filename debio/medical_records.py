"""Electronic medical records: per-owner records holding info entries."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Callable, Protocol

from debio.chain import (
    AccountId,
    Pallet,
    PalletError,
    ensure_signed,
    generate_id,
    wrapping_add,
    wrapping_sub,
)


class MedicalRecordError(PalletError):
    """Base class for electronic medical record errors."""


class NotAllowedToCreate(MedicalRecordError):
    """The account is not allowed to create an electronic medical record."""


class NotElectronicMedicalRecordOwner(MedicalRecordError):
    """The account does not own the electronic medical record entry."""


class ElectronicMedicalRecordDoesNotExist(MedicalRecordError):
    """The electronic medical record or entry does not exist."""


@dataclass
class ElectronicMedicalRecord:
    """An owner's medical record: the ids of the entries it holds."""

    owner_id: AccountId
    info: list[bytes] = field(default_factory=list)

    def add_info(self, info_id: bytes) -> None:
        """Attach an entry id."""
        self.info.append(info_id)

    def remove_info(self, info_id: bytes) -> None:
        """Detach the first occurrence of an entry id, if present."""
        if info_id in self.info:
            self.info.remove(info_id)

    def copy(self) -> ElectronicMedicalRecord:
        """Return an independent copy of this record."""
        return dataclasses.replace(self, info=list(self.info))


@dataclass(frozen=True)
class ElectronicMedicalRecordInfo:
    """One entry of a medical record."""

    id: bytes
    owner_id: AccountId
    title: bytes
    description: bytes
    record_link: bytes
    uploaded_at: Any


class _InfoOwner(Protocol):
    def get_owner(self, owner_id: AccountId) -> Any | None: ...

    def associate(self, owner_id: AccountId, info_id: bytes) -> None: ...

    def disassociate(self, owner_id: AccountId, info_id: bytes) -> None: ...


class ElectronicMedicalRecordPallet(Pallet):
    """Keeps medical records and their entries.

    ``clock`` returns the current moment; ``owner`` tracks which entries
    belong to which record and defaults to this pallet itself.
    """

    def __init__(
        self,
        clock: Callable[[], Any] | None = None,
        owner: _InfoOwner | None = None,
    ) -> None:
        super().__init__()
        self._clock = clock if clock is not None else (lambda: 0)
        self._owner: _InfoOwner = owner if owner is not None else self
        self._records: dict[AccountId, ElectronicMedicalRecord] = {}
        self._infos: dict[bytes, ElectronicMedicalRecordInfo] = {}
        self._count: int | None = None
        self._count_by_owner: dict[AccountId, int] = {}

    def generate_info_id(self, owner_id: AccountId, info_count: int) -> bytes:
        """Derive the id of an owner's entry from their entry count."""
        return generate_id(owner_id, info_count)

    # ----- records -----

    def add_electronic_medical_record(self, origin: AccountId | None) -> ElectronicMedicalRecord:
        """Store a fresh, empty record for the signing account."""
        who = ensure_signed(origin)
        record = ElectronicMedicalRecord(who)
        self._records[who] = record
        snapshot = record.copy()
        self.deposit_event("ElectronicMedicalRecordAdded", snapshot, who)
        return snapshot

    def remove_electronic_medical_record(
        self, origin: AccountId | None
    ) -> ElectronicMedicalRecord:
        """Remove the signing account's record."""
        who = ensure_signed(origin)
        record = self._records.pop(who, None)
        if record is None:
            raise ElectronicMedicalRecordDoesNotExist(f"{who!r} has no medical record")
        self.deposit_event("ElectronicMedicalRecordRemoved", record, who)
        return record

    def electronic_medical_record_by_owner_id(
        self, owner_id: AccountId
    ) -> ElectronicMedicalRecord | None:
        """Return the account's record, or None."""
        record = self._records.get(owner_id)
        return None if record is None else record.copy()

    # ----- entries -----

    def add_electronic_medical_record_info(
        self,
        origin: AccountId | None,
        title: bytes,
        description: bytes,
        record_link: bytes,
    ) -> ElectronicMedicalRecordInfo:
        """Add an entry for the signing account and attach it to their record."""
        who = ensure_signed(origin)
        info_id = self.generate_info_id(
            who, self.electronic_medical_record_info_count_by_owner(who)
        )
        info = ElectronicMedicalRecordInfo(
            id=info_id,
            owner_id=who,
            title=bytes(title),
            description=bytes(description),
            record_link=bytes(record_link),
            uploaded_at=self._clock(),
        )
        self._infos[info_id] = info

        self._count = wrapping_add(self._count or 0)
        self._count_by_owner[who] = wrapping_add(self._count_by_owner.get(who, 0))
        self._owner.associate(who, info_id)

        self.deposit_event("ElectronicMedicalRecordInfoAdded", info, who)
        return info

    def remove_electronic_medical_record_info(
        self, origin: AccountId | None, info_id: bytes
    ) -> ElectronicMedicalRecordInfo:
        """Remove an entry the caller owns and detach it from their record."""
        who = ensure_signed(origin)
        info = self._infos.get(info_id)
        if info is None:
            raise ElectronicMedicalRecordDoesNotExist(info_id.hex())
        if info.owner_id != who:
            raise NotElectronicMedicalRecordOwner(f"{who!r} does not own {info_id.hex()}")
        if self._owner.get_owner(who) is None:
            raise LookupError(f"no medical record for {who!r}")

        info = self._infos.pop(info_id)
        self._owner.disassociate(who, info.id)
        self._count = wrapping_sub(1 if self._count is None else self._count)
        self._count_by_owner[who] = wrapping_sub(self._count_by_owner.get(who, 1))

        self.deposit_event("ElectronicMedicalRecordInfoRemoved", info, who)
        return info

    def electronic_medical_record_info_by_id(
        self, info_id: bytes
    ) -> ElectronicMedicalRecordInfo | None:
        """Return the entry with the given id, or None."""
        return self._infos.get(info_id)

    def electronic_medical_record_info_count_by_owner(self, owner_id: AccountId) -> int:
        """The account's entry count; one when nothing has been counted yet."""
        return self._count_by_owner.get(owner_id, 1)

    def electronic_medical_record_info_count(self) -> int:
        """Number of entries in total."""
        return self._count or 0

    # ----- entry ownership -----

    def get_owner(self, owner_id: AccountId) -> ElectronicMedicalRecord | None:
        """Return the record that owns entries for the account, or None."""
        return self.electronic_medical_record_by_owner_id(owner_id)

    def associate(self, owner_id: AccountId, info_id: bytes) -> None:
        """Attach an entry to the account's record, if it exists."""
        record = self._records.get(owner_id)
        if record is not None:
            record.add_info(info_id)

    def disassociate(self, owner_id: AccountId, info_id: bytes) -> None:
        """Detach an entry from the account's record, if it exists."""
        record = self._records.get(owner_id)
        if record is not None:
            record.remove_info(info_id)
"""Doctors registered by account, indexed by location, owning certifications."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Protocol

from debio.chain import (
    AccountId,
    Pallet,
    PalletError,
    ensure_signed,
    wrapping_add,
    wrapping_sub,
)
from debio.doctor_certifications import DoctorCertificationOwner


class DoctorError(PalletError):
    """Base class for doctor errors."""


class DoctorAlreadyRegistered(DoctorError):
    """The account already has a doctor registered."""


class DoctorDoesNotExist(DoctorError):
    """No doctor is registered for the account."""


@dataclass(frozen=True)
class DoctorInfo:
    """The part of a doctor record its owner may change."""

    name: bytes = b""
    email: bytes = b""
    country: bytes = b""
    region: bytes = b""
    city: bytes = b""
    address: bytes = b""
    latitude: bytes | None = None
    longitude: bytes | None = None
    profile_image: bytes | None = None


def build_country_region_code(country_code: bytes, region_code: bytes) -> bytes:
    """Join a country code and a region code with a dash: XX-YYY."""
    return country_code + b"-" + region_code


@dataclass
class Doctor:
    """A registered doctor and the ids of the certifications they own."""

    account_id: AccountId
    info: DoctorInfo
    certifications: list[bytes] = field(default_factory=list)

    def add_certification(self, certification_id: bytes) -> None:
        """Attach a certification id."""
        self.certifications.append(certification_id)

    def remove_certification(self, certification_id: bytes) -> None:
        """Detach the first occurrence of a certification id, if present."""
        if certification_id in self.certifications:
            self.certifications.remove(certification_id)

    def country_region(self) -> bytes:
        """The doctor's country-region code."""
        return build_country_region_code(self.info.country, self.info.region)

    def copy(self) -> Doctor:
        """Return an independent copy of this record."""
        return dataclasses.replace(self, certifications=list(self.certifications))


class DoctorCertificationsProvider(Protocol):
    """Deletes doctor certifications on behalf of their owner."""

    def delete_certification(
        self, origin: AccountId | None, certification_id: bytes, *, emit_event: bool = True
    ) -> Any:
        """Delete a certification owned by origin."""


class UserProfileProvider(Protocol):
    """Looks up the Ethereum address an account has set."""

    def get_eth_address_by_account_id(self, account_id: AccountId) -> Any | None:
        """Return the account's Ethereum address, or None."""


class DoctorsPallet(Pallet, DoctorCertificationOwner):
    """Registers, updates and deregisters doctors."""

    def __init__(
        self,
        user_profile: UserProfileProvider,
        certifications: DoctorCertificationsProvider | None,
    ) -> None:
        super().__init__()
        self.user_profile = user_profile
        self.certifications = certifications
        self._doctors: dict[AccountId, Doctor] = {}
        self._by_location: dict[tuple[bytes, bytes], list[AccountId]] = {}
        self._count: int | None = None
        self._count_by_location: dict[tuple[bytes, bytes], int] = {}

    # ----- dispatchable calls -----

    def register_doctor(self, origin: AccountId | None, info: DoctorInfo) -> Doctor:
        """Register the signing account as a doctor."""
        who = ensure_signed(origin)
        if who in self._doctors:
            raise DoctorAlreadyRegistered(f"{who!r} is already a doctor")
        doctor = Doctor(who, info)
        self._doctors[who] = doctor
        self._insert_into_location(doctor)
        self._count = wrapping_add(self._count or 0)
        self._add_count_by_location(doctor)

        snapshot = doctor.copy()
        self.deposit_event("DoctorRegistered", snapshot, who)
        return snapshot

    def update_doctor(self, origin: AccountId | None, info: DoctorInfo) -> Doctor:
        """Replace the information of the signing doctor."""
        who = ensure_signed(origin)
        doctor = self._doctors.get(who)
        if doctor is None:
            raise DoctorDoesNotExist(f"{who!r} is not a doctor")

        if (
            doctor.info.country != info.country
            or doctor.info.region != info.region
            or doctor.info.city != info.city
        ):
            self._remove_from_location(doctor)
            self._sub_count_by_location(doctor)

        doctor.info = info
        self._insert_into_location(doctor)
        self._add_count_by_location(doctor)

        snapshot = doctor.copy()
        self.deposit_event("DoctorUpdated", snapshot, who)
        return snapshot

    def deregister_doctor(self, origin: AccountId | None) -> Doctor:
        """Remove the signing doctor together with their certifications."""
        who = ensure_signed(origin)
        doctor = self._doctors.get(who)
        if doctor is None:
            raise DoctorDoesNotExist(f"{who!r} is not a doctor")

        snapshot = doctor.copy()
        if self.certifications is not None:
            for certification_id in snapshot.certifications:
                try:
                    self.certifications.delete_certification(
                        who, certification_id, emit_event=False
                    )
                except PalletError:
                    pass

        self._remove_from_location(doctor)
        self._sub_count_by_location(doctor)
        del self._doctors[who]
        self._count = wrapping_sub(1 if self._count is None else self._count)

        self.deposit_event("DoctorDeleted", snapshot, who)
        return snapshot

    # ----- queries -----

    def doctor_by_account_id(self, account_id: AccountId) -> Doctor | None:
        """Return the doctor registered for the account, or None."""
        doctor = self._doctors.get(account_id)
        return None if doctor is None else doctor.copy()

    def doctors_by_country_region_city(
        self, country_region_code: bytes, city_code: bytes
    ) -> list[AccountId] | None:
        """Account ids of doctors in a location, or None if none was ever stored."""
        doctors = self._by_location.get((country_region_code, city_code))
        return None if doctors is None else list(doctors)

    def doctor_count(self) -> int:
        """Number of registered doctors."""
        return self._count or 0

    def doctor_count_by_country_region_city(
        self, country_region_code: bytes, city_code: bytes
    ) -> int:
        """Number of doctors counted in a location."""
        return self._count_by_location.get((country_region_code, city_code), 0)

    # ----- certification ownership -----

    def can_create_certification(self, user_id: AccountId) -> bool:
        """A doctor with an Ethereum address set may create certifications."""
        eth_address = self.user_profile.get_eth_address_by_account_id(user_id)
        return user_id in self._doctors and eth_address is not None

    def get_owner(self, owner_id: AccountId) -> Doctor | None:
        """Return the doctor that owns certifications for the account, or None."""
        return self.doctor_by_account_id(owner_id)

    def associate(self, owner_id: AccountId, certification_id: bytes) -> None:
        """Attach a certification to the doctor, if registered."""
        doctor = self._doctors.get(owner_id)
        if doctor is not None:
            doctor.add_certification(certification_id)

    def disassociate(self, owner_id: AccountId, certification_id: bytes) -> None:
        """Detach a certification from the doctor, if registered."""
        doctor = self._doctors.get(owner_id)
        if doctor is not None:
            doctor.remove_certification(certification_id)

    # ----- location bookkeeping -----

    @staticmethod
    def _location(doctor: Doctor) -> tuple[bytes, bytes]:
        return doctor.country_region(), doctor.info.city

    def _insert_into_location(self, doctor: Doctor) -> None:
        self._by_location.setdefault(self._location(doctor), []).append(doctor.account_id)

    def _remove_from_location(self, doctor: Doctor) -> None:
        key = self._location(doctor)
        self._by_location[key] = [
            account_id
            for account_id in self._by_location.get(key, [])
            if account_id != doctor.account_id
        ]

    def _add_count_by_location(self, doctor: Doctor) -> None:
        key = self._location(doctor)
        self._count_by_location[key] = wrapping_add(self._count_by_location.get(key, 0))

    def _sub_count_by_location(self, doctor: Doctor) -> None:
        key = self._location(doctor)
        self._count_by_location[key] = wrapping_sub(self._count_by_location.get(key, 1))
import pytest

from debio.chain import BadOrigin, generate_id
from debio.doctor_certifications import (
    DoctorCertification,
    DoctorCertificationDoesNotExist,
    DoctorCertificationError,
    DoctorCertificationInfo,
    DoctorCertificationOwner,
    DoctorCertificationsPallet,
    NotAllowedToCreate,
    NotDoctorCertificationOwner,
)


class FakeDoctors(DoctorCertificationOwner):
    def __init__(self, allowed):
        self.owned = {account: [] for account in allowed}

    def can_create_certification(self, user_id):
        return user_id in self.owned

    def get_owner(self, owner_id):
        return self.owned.get(owner_id)

    def associate(self, owner_id, certification_id):
        if owner_id in self.owned:
            self.owned[owner_id].append(certification_id)

    def disassociate(self, owner_id, certification_id):
        if owner_id in self.owned and certification_id in self.owned[owner_id]:
            self.owned[owner_id].remove(certification_id)


@pytest.fixture
def doctors():
    return FakeDoctors({"alice", "bob"})


@pytest.fixture
def pallet(doctors):
    return DoctorCertificationsPallet(doctors)


INFO = DoctorCertificationInfo(
    title=b"Board Certified", issuer=b"Medical Board", month=b"May", year=b"2020",
    description=b"General practice",
)


def test_create_stores_and_counts(pallet, doctors):
    cert = pallet.create_certification("alice", INFO)
    assert cert.owner_id == "alice"
    assert cert.info == INFO
    assert cert.id == generate_id("alice", 0)
    assert pallet.certification_by_id(cert.id) == cert
    assert pallet.certification_count_by_owner("alice") == 1
    assert pallet.certifications_count() == 1
    assert doctors.owned["alice"] == [cert.id]
    assert pallet.events[-1].name == "DoctorCertificationCreated"
    assert pallet.events[-1].args == (cert, "alice")


def test_ids_follow_owner_count(pallet):
    first = pallet.create_certification("alice", INFO)
    second = pallet.create_certification("alice", INFO)
    assert first.id != second.id
    assert second.id == pallet.generate_certification_id("alice", 1)
    assert pallet.certification_count_by_owner("alice") == 2


def test_create_not_allowed(pallet):
    with pytest.raises(NotAllowedToCreate):
        pallet.create_certification("mallory", INFO)
    assert pallet.certifications_count() == 0
    assert pallet.events == []


def test_unsigned_origin_rejected(pallet):
    with pytest.raises(BadOrigin):
        pallet.create_certification(None, INFO)


def test_update_replaces_info(pallet):
    cert = pallet.create_certification("alice", INFO)
    new_info = DoctorCertificationInfo(title=b"Renewed")
    updated = pallet.update_certification("alice", cert.id, new_info)
    assert updated == DoctorCertification(cert.id, "alice", new_info)
    assert pallet.certification_by_id(cert.id).info == new_info
    assert pallet.events[-1].name == "DoctorCertificationUpdated"


def test_update_missing_and_foreign(pallet):
    cert = pallet.create_certification("alice", INFO)
    with pytest.raises(DoctorCertificationDoesNotExist):
        pallet.update_certification("alice", b"\x00" * 32, INFO)
    with pytest.raises(NotDoctorCertificationOwner):
        pallet.update_certification("bob", cert.id, DoctorCertificationInfo())
    assert pallet.certification_by_id(cert.id).info == INFO


def test_delete_removes_and_decrements(pallet, doctors):
    cert = pallet.create_certification("alice", INFO)
    deleted = pallet.delete_certification("alice", cert.id)
    assert deleted == cert
    assert pallet.certification_by_id(cert.id) is None
    assert pallet.certifications_count() == 0
    assert pallet.certification_count_by_owner("alice") == 0
    assert doctors.owned["alice"] == []
    assert pallet.events[-1].name == "DoctorCertificationDeleted"


def test_delete_without_event(pallet):
    cert = pallet.create_certification("alice", INFO)
    before = len(pallet.events)
    pallet.delete_certification("alice", cert.id, emit_event=False)
    assert len(pallet.events) == before
    assert pallet.certification_by_id(cert.id) is None


def test_delete_errors(pallet):
    cert = pallet.create_certification("alice", INFO)
    with pytest.raises(NotDoctorCertificationOwner):
        pallet.delete_certification("bob", cert.id)
    with pytest.raises(DoctorCertificationDoesNotExist):
        pallet.delete_certification("alice", b"\x01" * 32)
    assert pallet.certifications_count() == 1


def test_errors_share_base():
    assert issubclass(NotAllowedToCreate, DoctorCertificationError)
    assert issubclass(DoctorCertificationDoesNotExist, DoctorCertificationError)
    with pytest.raises(DoctorCertificationError):
        DoctorCertificationsPallet(FakeDoctors(set())).create_certification("x", INFO)
# debio

State machines for a medical data ledger, kept in memory:

- `debio.chain`: what the modules share. `ensure_signed` turns an origin into
  the signing account (raising `BadOrigin` for `None`), `generate_id` derives
  a 32-byte BLAKE2b id from an account and a count, and `Pallet` keeps the
  `Event`s a module deposits in its `events` list, oldest first. Every error
  raised by a module derives from `PalletError`.
- `debio.certifications`: `CertificationsPallet`, certifications that an
  account creates, updates and deletes. Who may create them is decided by a
  `CertificationOwner` passed in.
- `debio.doctor_certifications`: `DoctorCertificationsPallet`, the same for
  doctor certifications, with `DoctorCertificationOwner` deciding.
- `debio.doctors`: `DoctorsPallet`, doctor registration indexed by
  country-region code (`build_country_region_code`, e.g. `b"ID-JB"`) and
  city. It is a `DoctorCertificationOwner`: a registered doctor with an
  Ethereum address set may create doctor certifications, and deregistering a
  doctor deletes their certifications.
- `debio.medical_records`: `ElectronicMedicalRecordPallet`, one record per
  account and the entries attached to it.

Every call that changes state takes an `origin`, the signing account, and
returns the stored item. Failures raise exceptions.

## Install

```
pip install .
```

For the tests:

```
pip install ".[test]"
pytest
```

## Example

Doctors and their certifications:

```python
from debio.doctors import DoctorsPallet, DoctorInfo
from debio.doctor_certifications import (
    DoctorCertificationsPallet,
    DoctorCertificationInfo,
)

class Profiles:
    def get_eth_address_by_account_id(self, account_id):
        return "0xabc" if account_id == "alice" else None

doctors = DoctorsPallet(Profiles(), certifications=None)
certifications = DoctorCertificationsPallet(doctors)
doctors.certifications = certifications

doctors.register_doctor("alice", DoctorInfo(
    name=b"Alice", email=b"alice@example.com", country=b"ID",
    region=b"JB", city=b"BDG", address=b"Street 1",
))
doctors.doctors_by_country_region_city(b"ID-JB", b"BDG")  # ["alice"]

cert = certifications.create_certification(
    "alice", DoctorCertificationInfo(title=b"Cardiology", issuer=b"Board"),
)
doctors.doctor_by_account_id("alice").certifications  # [cert.id]

doctors.deregister_doctor("alice")
certifications.certification_by_id(cert.id)  # None
[event.name for event in doctors.events]  # ["DoctorRegistered", "DoctorDeleted"]
```

Medical records:

```python
from debio.medical_records import ElectronicMedicalRecordPallet

records = ElectronicMedicalRecordPallet(clock=lambda: 1_700_000_000_000)
records.add_electronic_medical_record("bob")
entry = records.add_electronic_medical_record_info(
    "bob", b"Blood test", b"Annual check", b"https://example.com/record",
)
records.electronic_medical_record_by_owner_id("bob").info  # [entry.id]
entry.uploaded_at  # 1700000000000
```

## What it does not do

All state lives in Python objects and is lost when the process ends; there
is no storage, network node or command line. It does not track DNA samples
or genetic test results, and does not generate sample tracking ids.
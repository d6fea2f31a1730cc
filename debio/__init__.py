"""In-memory ledger modules for doctors, certifications and electronic medical records."""

__version__ = "0.1.0"
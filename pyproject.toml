[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "debio"
version = "0.1.0"
description = "In-memory ledger modules for doctors, certifications and electronic medical records"
requires-python = ">=3.10"
dependencies = []
keywords = ["medical", "doctors", "certifications", "electronic-medical-record", "ledger"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Healthcare Industry",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Medical Science Apps.",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["debio"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

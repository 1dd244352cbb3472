[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "paratable"
version = "0.1.0"
description = "Statement tables, candidate attestation and inclusion timing for parachain validator groups"
requires-python = ">=3.10"
dependencies = [
    "pycryptodome",
]
keywords = [
    "parachain",
    "consensus",
    "validation",
    "statement-table",
    "attestation",
    "misbehavior",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Distributed Computing",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["paratable"]

[tool.hatch.build.targets.sdist]
include = [
    "paratable",
    "tests",
]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
check_untyped_defs = true

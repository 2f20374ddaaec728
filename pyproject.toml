[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "scuttlekit"
version = "0.1.0"
description = "Secure Scuttlebutt building blocks: identities, signed feed messages, private boxes, MUXRPC framing and API calls."
requires-python = ">=3.10"
keywords = [
    "ssb",
    "scuttlebutt",
    "secure-scuttlebutt",
    "muxrpc",
    "ed25519",
    "private-box",
    "peer-to-peer",
    "gossip",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Framework :: AsyncIO",
    "Topic :: Communications :: File Sharing",
    "Topic :: Security :: Cryptography",
    "Topic :: Software Development :: Libraries :: Python Modules",
]
dependencies = [
    "pynacl>=1.5",
    "psutil>=5.9",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
    "pytest-asyncio>=0.21",
]

[tool.hatch.build.targets.wheel]
packages = ["scuttlekit"]

[tool.hatch.build.targets.sdist]
include = ["scuttlekit", "tests", "pyproject.toml"]

[tool.pytest.ini_options]
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

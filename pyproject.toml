[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tftpclient"
version = "0.3.0"
description = "A TFTP (RFC 1350) client with retries and exponential backoff, in blocking and asyncio flavours"
requires-python = ">=3.11"
dependencies = []
keywords = ["tftp", "rfc1350", "udp", "file-transfer", "client", "asyncio"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Framework :: AsyncIO",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: File Transfer Protocol (FTP)",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[project.scripts]
tftpclient = "tftpclient.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["tftpclient"]

[tool.hatch.build.targets.sdist]
include = ["tftpclient", "tests", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py311"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.11"
strict = true
files = ["tftpclient"]

[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sigscan"
version = "1.0.0"
description = "Byte-signature file scanner with a multi-worker scan server and a directory-walking client"
requires-python = ">=3.10"
dependencies = []
keywords = ["scanner", "signatures", "malware-detection", "client-server", "threads"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
sigscan-server = "sigscan.server:main"
sigscan-client = "sigscan.client:main"

[tool.hatch.build.targets.wheel]
packages = ["sigscan"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

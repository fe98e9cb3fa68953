[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pwvault"
version = "0.1.0"
description = "Password vault program model: instruction decoding, account state encoding and an in-memory account runtime"
requires-python = ">=3.10"
dependencies = []
keywords = ["password", "vault", "credentials", "borsh", "program-derived-address"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Security",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["pwvault"]

[tool.pytest.ini_options]
addopts = "-ra"

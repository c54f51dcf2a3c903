[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "nixsetup"
version = "0.1.0"
description = "Host-aware default settings for a Nix installation: build users, package URL and init system"
requires-python = ">=3.10"
dependencies = []
keywords = ["nix", "installer", "settings", "systemd", "launchd"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX :: Linux",
    "Operating System :: MacOS",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Installation/Setup",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["nixsetup"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

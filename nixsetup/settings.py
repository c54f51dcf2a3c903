"""Configurable installer settings and the errors they can raise."""

from __future__ import annotations

import json
import platform
import re
import subprocess
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any
from urllib.parse import urlsplit, urlunsplit

SCRATCH_DIR = "/nix/temp-install-dir"

NIX_X64_64_LINUX_URL = (
    "https://releases.nixos.org/nix/nix-2.17.0/nix-2.17.0-x86_64-linux.tar.xz"
)
NIX_I686_LINUX_URL = (
    "https://releases.nixos.org/nix/nix-2.17.0/nix-2.17.0-i686-linux.tar.xz"
)
NIX_AARCH64_LINUX_URL = (
    "https://releases.nixos.org/nix/nix-2.17.0/nix-2.17.0-aarch64-linux.tar.xz"
)
NIX_X64_64_DARWIN_URL = (
    "https://releases.nixos.org/nix/nix-2.17.0/nix-2.17.0-x86_64-darwin.tar.xz"
)
NIX_AARCH64_DARWIN_URL = (
    "https://releases.nixos.org/nix/nix-2.17.0/nix-2.17.0-aarch64-darwin.tar.xz"
)

DEFAULT_DIAGNOSTIC_ENDPOINT = "https://install.determinate.systems/nix/diagnostic"

_ARCH_ALIASES = {
    "x86_64": "x86_64",
    "amd64": "x86_64",
    "i386": "i686",
    "i486": "i686",
    "i586": "i686",
    "i686": "i686",
    "x86": "i686",
    "aarch64": "aarch64",
    "arm64": "aarch64",
}

_OS_ALIASES = {
    "linux": "linux",
    "darwin": "darwin",
    "macos": "darwin",
    "macosx": "darwin",
}

_SPECIAL_SCHEMES = {"http", "https", "ftp", "ws", "wss"}
_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")


class InitSystem(str, Enum):
    """The init system the installer configures."""

    NONE = "none"
    SYSTEMD = "systemd"
    LAUNCHD = "launchd"

    def __str__(self) -> str:
        return self.value


class InstallSettingsError(Exception):
    """Base error raised while building or listing settings."""

    variant = "InstallSettings"

    def diagnostic(self) -> str:
        """A short, stable name for this error, suitable for reporting."""
        return self.variant


class UnsupportedArchitectureError(InstallSettingsError):
    """The host architecture and operating system pair is not supported."""

    variant = "UnsupportedArchitecture"

    def __init__(self, triple: str) -> None:
        self.triple = triple
        super().__init__(
            f"`nix-installer` does not support the `{triple}` architecture right now"
        )


class UrlParseError(InstallSettingsError):
    """A URL could not be parsed."""

    variant = "Parse"

    def __init__(self, value: str = "") -> None:
        self.value = value
        super().__init__("Parsing URL")


class _SerdeJsonError(InstallSettingsError):
    variant = "SerdeJson"

    def __init__(self) -> None:
        super().__init__("JSON serialization or deserialization error")


class InitNotSupportedError(InstallSettingsError):
    """No supported init system was found."""

    variant = "InitNotSupported"

    def __init__(self) -> None:
        super().__init__("No supported init system found")


def _host(machine: str | None, system: str | None) -> tuple[str | None, str | None, str, str]:
    machine = platform.machine() if machine is None else machine
    system = platform.system() if system is None else system
    arch = _ARCH_ALIASES.get(machine.lower())
    os_name = _OS_ALIASES.get(system.lower())
    return arch, os_name, machine, system


def host_triple(machine: str | None = None, system: str | None = None) -> str:
    """Describe a host as a target triple such as ``x86_64-unknown-linux-gnu``."""
    arch, os_name, raw_machine, raw_system = _host(machine, system)
    arch = arch or raw_machine.lower()
    if os_name == "linux":
        return f"{arch}-unknown-linux-gnu"
    if os_name == "darwin":
        return f"{arch}-apple-darwin"
    return f"{arch}-unknown-{raw_system.lower() or 'unknown'}"


def parse_url(value: str) -> str:
    """Validate an absolute URL and return it in normalised form."""
    if not isinstance(value, str):
        raise UrlParseError(str(value))
    text = value.strip()
    if not text or any(ch.isspace() for ch in text):
        raise UrlParseError(value)
    try:
        parts = urlsplit(text)
        parts.port  # raises ValueError on an invalid port
    except ValueError as error:
        raise UrlParseError(value) from error
    scheme = parts.scheme.lower()
    if not scheme or not _SCHEME_RE.match(scheme):
        raise UrlParseError(value)
    path = parts.path
    if scheme in _SPECIAL_SCHEMES:
        if not parts.hostname:
            raise UrlParseError(value)
        if not path:
            path = "/"
    return urlunsplit((scheme, parts.netloc, path, parts.query, parts.fragment))


def linux_detect_systemd_started() -> bool:
    """Whether systemd is running as the init system on this host."""
    if not Path("/run/systemd/system").exists():
        return False
    try:
        result = subprocess.run(
            ["systemctl", "status"],
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            check=False,
        )
    except OSError:
        return False
    return result.returncode == 0


def _to_json(value: Any) -> Any:
    if isinstance(value, Path):
        value = str(value)
    elif isinstance(value, Enum):
        value = value.value
    try:
        return json.loads(json.dumps(value))
    except (TypeError, ValueError) as error:
        raise _SerdeJsonError() from error


_DEFAULTS_BY_HOST = {
    ("x86_64", "linux"): (NIX_X64_64_LINUX_URL, "nixbld", 30_000, 0),
    ("i686", "linux"): (NIX_I686_LINUX_URL, "nixbld", 30_000, 0),
    ("aarch64", "linux"): (NIX_AARCH64_LINUX_URL, "nixbld", 30_000, 0),
    ("x86_64", "darwin"): (NIX_X64_64_DARWIN_URL, "_nixbld", 300, 32),
    ("aarch64", "darwin"): (NIX_AARCH64_DARWIN_URL, "_nixbld", 300, 32),
}


@dataclass
class CommonSettings:
    """Settings shared by every installation planner."""

    modify_profile: bool
    nix_build_group_name: str
    nix_build_group_id: int
    nix_build_user_prefix: str
    nix_build_user_count: int
    nix_build_user_id_base: int
    nix_package_url: str
    proxy: str | None = None
    ssl_cert_file: Path | None = None
    extra_conf: list[str] = field(default_factory=list)
    force: bool = False
    diagnostic_endpoint: str | None = DEFAULT_DIAGNOSTIC_ENDPOINT

    @classmethod
    def default(cls, machine: str | None = None, system: str | None = None) -> CommonSettings:
        """The default settings for the given (or current) host."""
        arch, os_name, _, _ = _host(machine, system)
        try:
            url, prefix, id_base, count = _DEFAULTS_BY_HOST[(arch, os_name)]
        except KeyError:
            raise UnsupportedArchitectureError(host_triple(machine, system)) from None
        return cls(
            modify_profile=True,
            nix_build_group_name="nixbld",
            nix_build_group_id=30_000,
            nix_build_user_prefix=prefix,
            nix_build_user_count=count,
            nix_build_user_id_base=id_base,
            nix_package_url=parse_url(url),
        )

    def settings(self) -> dict[str, Any]:
        """A JSON-compatible listing of the settings."""
        return {
            "modify_profile": _to_json(self.modify_profile),
            "nix_build_group_name": _to_json(self.nix_build_group_name),
            "nix_build_group_id": _to_json(self.nix_build_group_id),
            "nix_build_user_prefix": _to_json(self.nix_build_user_prefix),
            "nix_build_user_id_base": _to_json(self.nix_build_user_id_base),
            "nix_build_user_count": _to_json(self.nix_build_user_count),
            "nix_package_url": _to_json(self.nix_package_url),
            "proxy": _to_json(self.proxy),
            "ssl_cert_file": _to_json(self.ssl_cert_file),
            "extra_conf": _to_json(self.extra_conf),
            "force": _to_json(self.force),
            "diagnostic_endpoint": _to_json(self.diagnostic_endpoint),
        }


@dataclass
class InitSettings:
    """Settings describing which init system to configure."""

    init: InitSystem
    start_daemon: bool = True

    @classmethod
    def default(cls, machine: str | None = None, system: str | None = None) -> InitSettings:
        """The default init settings for the given (or current) host."""
        arch, os_name, _, _ = _host(machine, system)
        if (arch, os_name) not in _DEFAULTS_BY_HOST:
            raise UnsupportedArchitectureError(host_triple(machine, system))
        if os_name == "linux":
            return cls(InitSystem.SYSTEMD, linux_detect_systemd_started())
        return cls(InitSystem.LAUNCHD, True)

    def settings(self) -> dict[str, Any]:
        """A JSON-compatible listing of the settings."""
        return {
            "init": _to_json(self.init),
            "start_daemon": _to_json(self.start_daemon),
        }

    def with_init(self, init: InitSystem) -> InitSettings:
        """Set the init system to configure; returns self for chaining."""
        self.init = InitSystem(init)
        return self

    def with_start_daemon(self, toggle: bool) -> InitSettings:
        """Set whether the daemon is started; returns self for chaining."""
        self.start_daemon = bool(toggle)
        return self
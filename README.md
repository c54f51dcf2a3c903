# nixsetup

Default settings for installing Nix on a host, worked out from its
architecture and operating system. Everything lives in `nixsetup.settings`.

Supported hosts are x86_64, i686 and aarch64 Linux, and x86_64 and aarch64
macOS. Common spellings are accepted (`amd64`, `arm64`, `i386`, `Darwin`,
`macOS` and so on). On other hosts an `UnsupportedArchitectureError` is
raised.

## Installing

```
pip install .
```

## Common settings

`CommonSettings.default()` picks the Nix package URL, the build user prefix,
the base UID and the number of build users for the current host. Pass
`machine` and `system` to ask for another host's defaults:

```python
from nixsetup.settings import CommonSettings

settings = CommonSettings.default(machine="x86_64", system="Linux")
print(settings.nix_package_url)
print(settings.nix_build_user_prefix)   # "nixbld"
print(settings.nix_build_user_id_base)  # 30000
print(settings.nix_build_user_count)    # 0
```

On macOS the prefix is `_nixbld`, the base UID 300 and the count 32. On
every host the build group is `nixbld` with GID 30000, `modify_profile` is
true, `force` is false, `proxy` and `ssl_cert_file` are unset and
`extra_conf` is empty.

`settings()` returns every setting by name as a dict of JSON-ready values
(paths and enum members become strings), for reports and diagnostics.

## Init settings

`InitSettings.default()` chooses the init system: `InitSystem.SYSTEMD` on
Linux and `InitSystem.LAUNCHD` on macOS. On Linux the daemon is started only
when `linux_detect_systemd_started()` finds `/run/systemd/system` and a
successful `systemctl status`; on macOS it is always started.

`with_init()` and `with_start_daemon()` change a setting and return the same
object, so they can be chained:

```python
from nixsetup.settings import InitSettings, InitSystem

init = InitSettings(InitSystem.SYSTEMD).with_init(InitSystem.NONE).with_start_daemon(False)
print(init.settings())   # {"init": "none", "start_daemon": False}
```

## Helpers

- `host_triple(machine=None, system=None)` describes a host as a target
  triple, for example `x86_64-unknown-linux-gnu` or `aarch64-apple-darwin`.
- `parse_url(value)` checks that a value is an absolute URL and returns it
  with a lower-case scheme (and a `/` path for web schemes with none). It
  raises `UrlParseError` otherwise.

## Errors

Every error derives from `InstallSettingsError`. Its `diagnostic()` method
returns a short, stable name for the error: `UnsupportedArchitecture` for
`UnsupportedArchitectureError`, `Parse` for `UrlParseError` and
`InitNotSupported` for `InitNotSupportedError`.

## What this package does not do

It only works out and lists settings. It does not install Nix, create
build users or groups, write configuration files, download anything or
provide a command-line program.

## Running the tests

```
pip install .[test]
pytest
```
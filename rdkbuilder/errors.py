"""
Error taxonomy for flag resolution and native builds.

Configuration-shape errors (UnknownFlag, ConflictingFlags,
NoVendoredFormAvailable) are raised before any external process runs.
Environment errors (DependencyNotFound, IncompatibleVersion, ProbeUnavailable)
carry the dependency, what was probed and what was required so the caller can
fix the host rather than the flag set.
"""


class ConfigError(Exception):
    """Base class for every error that aborts a resolution or a build."""


class InvalidConfigFile(ConfigError):
    def __init__(self, path, reason):
        self.path = path
        self.reason = str(reason)
        super().__init__(f"Cannot use {path}: {self.reason}")


class InvalidConfigValue(ConfigError):
    def __init__(self, key, value, expected):
        self.key = key
        self.value = value
        self.expected = expected
        super().__init__(f"Invalid value {value!r} for '{key}' in the build configuration: expected {expected}.")


class UnknownFlag(ConfigError):
    def __init__(self, flag, known=()):
        self.flag = flag
        self.known = tuple(sorted(known))
        message = f"Unknown feature flag '{flag}'."
        if self.known:
            message += f" Known flags: {', '.join(self.known)}"
        super().__init__(message)


class ConflictingFlags(ConfigError):
    def __init__(self, first, second, reason=""):
        self.flags = (first, second)
        message = f"Feature flags '{first}' and '{second}' cannot be enabled together"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class NoVendoredFormAvailable(ConfigError):
    def __init__(self, dependency, flag):
        self.dependency = dependency
        self.flag = flag
        super().__init__(
            f"'{flag}' requests a vendored static build of {dependency}, "
            f"but no vendored form of {dependency} is available. "
            f"Install {dependency} on the host and drop '{flag}'."
        )


class DependencyNotFound(ConfigError):
    def __init__(self, dependency, probed, detail=""):
        self.dependency = dependency
        self.probed = probed
        self.detail = detail
        message = f"{dependency} was not found on this system (probed pkg-config module '{probed}')."
        if detail:
            message += f" {detail}"
        super().__init__(message)


class IncompatibleVersion(ConfigError):
    def __init__(self, dependency, found, required):
        self.dependency = dependency
        self.found = str(found)
        self.required = str(required)
        super().__init__(
            f"{dependency} {self.found} is installed, but version {self.required} or newer is required."
        )


class ProbeUnavailable(ConfigError):
    def __init__(self, dependency, reason):
        self.dependency = dependency
        self.reason = reason
        super().__init__(f"Could not probe the system for {dependency}: {reason}")


class BuildDriverFailed(ConfigError):
    def __init__(self, step, exit_code):
        self.step = step
        self.exit_code = exit_code
        super().__init__(f"Native build step '{step}' failed with exit code {exit_code}.")


class UncoveredStatusCodes(Exception):
    """Raised when the native error catalog has codes without an ErrorKind."""

    def __init__(self, missing):
        self.missing = dict(missing)
        listing = ", ".join(f"{name}={code}" for name, code in sorted(self.missing.items(), key=lambda kv: kv[1]))
        super().__init__(f"{len(self.missing)} native status code(s) have no ErrorKind: {listing}")

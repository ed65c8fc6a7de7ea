"""
Capability registry: the recognized feature flags, the native libraries they
pull in and the rules between them.

Everything here is plain data consulted by ordinary control flow. Flag
validation happens here, before anything touches the host.
"""
from dataclasses import dataclass
from enum import Enum

from .errors import ConflictingFlags, NoVendoredFormAvailable, UnknownFlag
from .status_codes import CATALOG_VERSION

DYNAMIC_LINKING = "dynamic-linking"
STATIC_LINKING = "static-linking"
CMAKE_BUILD = "cmake-build"


class DefaultPolicy(Enum):
    DYNAMIC_PREFERRED = "dynamic-preferred"
    STATIC_PREFERRED = "static-preferred"


@dataclass(frozen=True)
class WrappedLibrary:
    name: str
    pkg_config_name: str
    link_name: str
    min_version: str


@dataclass(frozen=True)
class NativeDependency:
    name: str
    pkg_config_name: str
    link_names: tuple
    enable_flag: str
    static_flag: str | None = None
    dynamic_flag: str | None = None
    default_policy: DefaultPolicy = DefaultPolicy.DYNAMIC_PREFERRED
    vendored: bool = True
    probeable: bool = True
    min_version: str | None = None
    requires: tuple = ()
    description: str = ""


@dataclass(frozen=True)
class FlagInfo:
    name: str
    description: str
    implies_dependency: str | None
    conflicts_with: frozenset
    requires: frozenset


LIBRDKAFKA = WrappedLibrary(
    name="librdkafka",
    pkg_config_name="rdkafka",
    link_name="rdkafka",
    min_version=CATALOG_VERSION,
)

DEPENDENCIES = (
    NativeDependency(
        name="openssl",
        pkg_config_name="openssl",
        link_names=("ssl", "crypto"),
        enable_flag="ssl",
        static_flag="ssl-vendored",
        min_version="1.1.0",
        description="SSL support",
    ),
    NativeDependency(
        name="libsasl2",
        pkg_config_name="libsasl2",
        link_names=("sasl2",),
        enable_flag="gssapi",
        vendored=False,
        requires=("ssl",),
        description="SASL GSSAPI support with Cyrus libsasl2",
    ),
    NativeDependency(
        name="zlib",
        pkg_config_name="zlib",
        link_names=("z",),
        enable_flag="libz",
        static_flag="libz-static",
        description="zlib compression",
    ),
    NativeDependency(
        name="zstd",
        pkg_config_name="libzstd",
        link_names=("zstd",),
        enable_flag="zstd",
        dynamic_flag="zstd-pkg-config",
        default_policy=DefaultPolicy.STATIC_PREFERRED,
        description="ZSTD compression",
    ),
    NativeDependency(
        name="lz4",
        pkg_config_name="liblz4",
        link_names=("lz4",),
        enable_flag="external-lz4",
        default_policy=DefaultPolicy.STATIC_PREFERRED,
        probeable=False,
        description="external liblz4 instead of the copy bundled in librdkafka",
    ),
    NativeDependency(
        name="libcurl",
        pkg_config_name="libcurl",
        link_names=("curl",),
        enable_flag="curl",
        static_flag="curl-static",
        description="HTTP client used for OAUTHBEARER/OIDC",
    ),
)

LIBRARY_FLAGS = {
    DYNAMIC_LINKING: "link against a system-installed librdkafka instead of building it",
    STATIC_LINKING: "link every enabled optional dependency statically from its vendored form",
    CMAKE_BUILD: "build librdkafka with CMake instead of the mklove configure script",
}

ALIASES = {
    "cmake_build": CMAKE_BUILD,
    "external_lz4": "external-lz4",
}


class CapabilityRegistry:
    def __init__(self, dependencies=DEPENDENCIES, library_flags=None, aliases=None, library=LIBRDKAFKA):
        self.library = library
        self._dependencies = tuple(dependencies)
        self._by_name = {dep.name: dep for dep in self._dependencies}
        self._aliases = dict(ALIASES if aliases is None else aliases)
        library_flags = dict(LIBRARY_FLAGS if library_flags is None else library_flags)

        for dep in self._dependencies:
            if dep.default_policy is DefaultPolicy.STATIC_PREFERRED and not dep.vendored:
                raise ValueError(f"{dep.name} prefers a static build but has no vendored form")
            if dep.static_flag and not dep.vendored:
                raise ValueError(f"{dep.name} declares '{dep.static_flag}' but has no vendored form")
            if dep.dynamic_flag and not dep.probeable:
                raise ValueError(f"{dep.name} declares '{dep.dynamic_flag}' but cannot be probed")

        descriptions = {}
        implies = {}
        requires = {}
        conflicts = []

        for name, description in library_flags.items():
            descriptions[name] = description
        if DYNAMIC_LINKING in library_flags and STATIC_LINKING in library_flags:
            conflicts.append((DYNAMIC_LINKING, STATIC_LINKING))

        for dep in self._dependencies:
            descriptions[dep.enable_flag] = f"enable {dep.description or dep.name}"
            implies[dep.enable_flag] = dep.name
            requires[dep.enable_flag] = set(dep.requires)
            if dep.static_flag:
                descriptions[dep.static_flag] = f"statically link the vendored {dep.name}"
                implies[dep.static_flag] = dep.name
                requires[dep.static_flag] = {dep.enable_flag}
            if dep.dynamic_flag:
                descriptions[dep.dynamic_flag] = f"dynamically link the system {dep.name}"
                implies[dep.dynamic_flag] = dep.name
                requires[dep.dynamic_flag] = {dep.enable_flag}
                if dep.static_flag:
                    conflicts.append((dep.static_flag, dep.dynamic_flag))
                if STATIC_LINKING in library_flags:
                    conflicts.append((STATIC_LINKING, dep.dynamic_flag))

        conflict_map = {name: set() for name in descriptions}
        for first, second in conflicts:
            conflict_map[first].add(second)
            conflict_map[second].add(first)

        for name, required in requires.items():
            unknown = required - set(descriptions)
            if unknown:
                raise ValueError(f"'{name}' requires unknown flag(s): {', '.join(sorted(unknown))}")

        self._flags = {
            name: FlagInfo(
                name=name,
                description=descriptions[name],
                implies_dependency=implies.get(name),
                conflicts_with=frozenset(conflict_map[name]),
                requires=frozenset(requires.get(name, ())),
            )
            for name in descriptions
        }

    @property
    def flags(self):
        return tuple(sorted(self._flags))

    @property
    def dependencies(self):
        return self._dependencies

    def canonical(self, flag):
        name = self._aliases.get(flag, flag)
        if name not in self._flags:
            raise UnknownFlag(flag, self._flags)
        return name

    def describe(self, flag) -> FlagInfo:
        return self._flags[self.canonical(flag)]

    def dependency(self, name) -> NativeDependency:
        return self._by_name[name]

    def static_forced(self, dep, flags) -> str | None:
        """Returns the flag forcing a vendored build of dep, if any."""
        if dep.static_flag and dep.static_flag in flags:
            return dep.static_flag
        if STATIC_LINKING in flags and STATIC_LINKING in self._flags:
            return STATIC_LINKING
        return None

    def dynamic_forced(self, dep, flags) -> str | None:
        if dep.dynamic_flag and dep.dynamic_flag in flags:
            return dep.dynamic_flag
        return None

    def validate(self, flags, declared=()):
        """
        Canonicalizes and checks a raw flag set.

        Every declared name must be known, even those switched off. Enabled
        flags are expanded with everything they require, then checked for
        conflicts and for static requests that have no vendored form.
        Returns a frozenset of canonical flag names.
        """
        for name in declared:
            self.canonical(name)
        enabled = {self.canonical(name) for name in flags}

        pending = list(enabled)
        while pending:
            for required in self._flags[pending.pop()].requires:
                if required not in enabled:
                    enabled.add(required)
                    pending.append(required)

        for name in sorted(enabled):
            for other in sorted(self._flags[name].conflicts_with):
                if other in enabled:
                    first, second = sorted((name, other))
                    raise ConflictingFlags(first, second, self._conflict_reason(first, second))

        for dep in self._dependencies:
            if dep.enable_flag not in enabled:
                continue
            forcing = self.static_forced(dep, enabled)
            if forcing and not dep.vendored:
                raise NoVendoredFormAvailable(dep.name, forcing)

        return frozenset(enabled)

    def _conflict_reason(self, first, second):
        for dep in self._dependencies:
            if dep.dynamic_flag and dep.dynamic_flag in (first, second):
                return f"both a static and a dynamic build of {dep.name} were requested"
        return "the whole library cannot be both system-linked and statically vendored"


REGISTRY = CapabilityRegistry()

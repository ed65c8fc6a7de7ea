"""
Turns a BuildConfig into the one BuildPlan for this invocation.

Resolution is a single pass: flags are validated before anything touches the
host, every probe the plan needs is issued at once, and each dependency then
gets exactly one LinkDecision. Any failure is one ConfigError.
"""
import os
import re
from dataclasses import replace

from packaging.version import InvalidVersion, Version

from .cli_logger import logger
from .errors import DependencyNotFound, IncompatibleVersion, ProbeUnavailable
from .plan import BuildPlan, LinkDecision, LinkKind
from .prober import EnvironmentProber, ProbeStatus
from .registry import DYNAMIC_LINKING, REGISTRY, DefaultPolicy
from .utils.build_system_resolver import resolver_class, select_driver

_LEADING_VERSION = re.compile(r"\d+(?:\.\d+)*")


def _parse_version(text):
    """Versions like OpenSSL's 1.1.1k are compared on their numeric part."""
    match = _LEADING_VERSION.match(text or "")
    if not match:
        return None
    try:
        return Version(match.group(0))
    except InvalidVersion:
        return None


def check_version(name, found, required):
    if not required:
        return
    found_version = _parse_version(found)
    if found_version is None:
        logger.warning(f"Could not read the version of {name} ('{found}'); assuming it is compatible.")
        return
    if found_version < Version(required):
        raise IncompatibleVersion(name, found, required)


def _require_found(name, result):
    if result.status is ProbeStatus.UNAVAILABLE:
        raise ProbeUnavailable(name, result.detail)
    if result.status is ProbeStatus.NOT_FOUND:
        raise DependencyNotFound(name, result.pkg_config_name, result.detail)


def _needed_probes(flags, registry):
    needed = []
    if DYNAMIC_LINKING in flags:
        needed.append(registry.library.name)
    for dep in registry.dependencies:
        if dep.enable_flag not in flags or registry.static_forced(dep, flags):
            continue
        if registry.dynamic_forced(dep, flags) or dep.default_policy is DefaultPolicy.DYNAMIC_PREFERRED:
            needed.append(dep.name)
    return needed


def _system(name, link_names, result, reason):
    return LinkDecision(
        name=name,
        kind=LinkKind.DYNAMIC_SYSTEM,
        link_names=tuple(link_names),
        include_path=result.include_path,
        lib_path=result.lib_path,
        version=result.version,
        reason=reason,
    )


def _vendored(dep, config, reason):
    prefix = config.vendored_prefix(dep.name)
    return LinkDecision(
        name=dep.name,
        kind=LinkKind.STATIC_VENDORED,
        link_names=dep.link_names,
        include_path=os.path.join(prefix, "include"),
        lib_path=os.path.join(prefix, "lib"),
        reason=reason,
    )


def _resolve_library(flags, registry, probes):
    library = registry.library
    if DYNAMIC_LINKING not in flags:
        return LinkDecision(
            name=library.name,
            kind=LinkKind.STATIC_VENDORED,
            link_names=(library.link_name,),
            reason="built from the bundled sources",
        )
    result = probes[library.name]
    _require_found(library.name, result)
    check_version(library.name, result.version, library.min_version)
    return _system(library.name, (library.link_name,), result, f"'{DYNAMIC_LINKING}' requested")


def _decide(dep, flags, registry, probes, config):
    if dep.enable_flag not in flags:
        return LinkDecision(name=dep.name, kind=LinkKind.ABSENT, reason=f"'{dep.enable_flag}' not enabled")

    forcing = registry.static_forced(dep, flags)
    if forcing:
        return _vendored(dep, config, f"'{forcing}' requested")

    forcing = registry.dynamic_forced(dep, flags)
    if forcing:
        result = probes[dep.name]
        _require_found(dep.name, result)
        check_version(dep.name, result.version, dep.min_version)
        return _system(dep.name, dep.link_names, result, f"'{forcing}' requested")

    if dep.default_policy is DefaultPolicy.STATIC_PREFERRED:
        return _vendored(dep, config, "default policy: static-preferred")

    result = probes[dep.name]
    if result.found:
        check_version(dep.name, result.version, dep.min_version)
        return _system(dep.name, dep.link_names, result, "default policy: dynamic-preferred")
    if dep.vendored:
        logger.warning(f"{dep.name} not usable from the system ({result.detail or result.status.value}); "
                       f"falling back to the vendored copy.")
        return _vendored(dep, config, f"system {dep.name} {result.status.value}, vendored fallback")
    _require_found(dep.name, result)


def resolve(config, registry=REGISTRY, prober=None) -> BuildPlan:
    """
    Resolves the link strategy for config.

    Raises UnknownFlag, ConflictingFlags or NoVendoredFormAvailable before any
    probe, and DependencyNotFound, ProbeUnavailable or IncompatibleVersion
    when the host cannot satisfy the flags.
    """
    flags = registry.validate(config.requested_flags, declared=config.all_declared_flags)
    logger.debug(f"Resolving librdkafka build for features: {', '.join(sorted(flags)) or '(none)'}")

    needed = _needed_probes(flags, registry)
    probes = {}
    if needed:
        if prober is None:
            prober = EnvironmentProber(registry, timeout=config.probe_timeout)
        probes = prober.probe_all(needed)

    library = _resolve_library(flags, registry, probes)
    decisions = tuple(_decide(dep, flags, registry, probes, config) for dep in registry.dependencies)
    plan = BuildPlan(flags=frozenset(flags), library=library, decisions=decisions)

    driver = select_driver(plan)
    cls = resolver_class(driver)
    if cls is not None:
        include_dir, lib_dir = cls.artifact_dirs(config)
        library = replace(library, include_path=include_dir, lib_path=lib_dir)

    plan = replace(plan, library=library, driver=driver)
    for decision in plan.linked:
        logger.debug(f"  - {decision.name}: {decision.kind.value} ({decision.reason})")
    return plan

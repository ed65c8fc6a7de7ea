"""
Picks the native build driver for a BuildPlan and hands out the resolver
that knows how to drive it.
"""
from ...plan import BuildDriver, LinkKind
from ...registry import CMAKE_BUILD
from .base_resolver import BaseResolver
from .cmake_resolver import CMakeResolver
from .mklove_resolver import MkloveResolver

RESOLVERS = {
    BuildDriver.LEGACY: MkloveResolver,
    BuildDriver.DECLARATIVE: CMakeResolver,
}


def select_driver(plan) -> BuildDriver:
    """Nothing is built for a system librdkafka; otherwise CMake only when asked for."""
    if plan.link_kind is LinkKind.DYNAMIC_SYSTEM:
        return BuildDriver.NONE
    if CMAKE_BUILD in plan.flags:
        return BuildDriver.DECLARATIVE
    return BuildDriver.LEGACY


def resolver_class(driver):
    return RESOLVERS.get(driver)


def get_resolver(plan, config) -> BaseResolver | None:
    cls = resolver_class(plan.driver)
    return cls(plan, config) if cls else None

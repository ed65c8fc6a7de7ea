"""
Compiler and linker directives for a BuildPlan.

librdkafka comes first, then its dependencies in plan order, so static
archives precede the libraries they need. For every library the include and
search paths come before its link entries. A directive already emitted is not
repeated.
"""
import shlex
from dataclasses import dataclass

from .plan import LinkKind

STATIC = "static"
DYNAMIC = "dylib"


@dataclass(frozen=True)
class AddIncludePath:
    path: str

    def to_flags(self):
        return [f"-I{self.path}"]

    def as_dict(self):
        return {"directive": "include-path", "path": self.path}


@dataclass(frozen=True)
class AddLibrarySearchPath:
    path: str

    def to_flags(self):
        return [f"-L{self.path}"]

    def as_dict(self):
        return {"directive": "library-search-path", "path": self.path}


@dataclass(frozen=True)
class LinkLibrary:
    name: str
    kind: str

    def to_flags(self):
        if self.kind == STATIC:
            return ["-Wl,-Bstatic", f"-l{self.name}", "-Wl,-Bdynamic"]
        return [f"-l{self.name}"]

    def as_dict(self):
        return {"directive": "link-library", "name": self.name, "kind": self.kind}


def _link_kind(decision):
    return STATIC if decision.kind is LinkKind.STATIC_VENDORED else DYNAMIC


def emit(plan):
    directives = []
    seen = set()

    def _add(directive):
        if directive not in seen:
            seen.add(directive)
            directives.append(directive)

    for decision in plan.linked:
        if decision.include_path:
            _add(AddIncludePath(decision.include_path))
        if decision.lib_path:
            _add(AddLibrarySearchPath(decision.lib_path))
        for name in decision.link_names:
            _add(LinkLibrary(name, _link_kind(decision)))
    return directives


def to_flags(directives):
    flags = []
    for directive in directives:
        flags.extend(directive.to_flags())
    return flags


def to_env(directives):
    """CFLAGS and LDFLAGS values for a consumer driven through the environment."""
    cflags = [flag for d in directives if isinstance(d, AddIncludePath) for flag in d.to_flags()]
    ldflags = [flag for d in directives if not isinstance(d, AddIncludePath) for flag in d.to_flags()]
    return {
        "CFLAGS": shlex.join(cflags),
        "LDFLAGS": shlex.join(ldflags),
    }


def as_dicts(directives):
    return [directive.as_dict() for directive in directives]

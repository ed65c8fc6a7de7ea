from dataclasses import dataclass
from enum import Enum


class LinkKind(Enum):
    ABSENT = "absent"
    DYNAMIC_SYSTEM = "dynamic-system"
    STATIC_VENDORED = "static-vendored"


class BuildDriver(Enum):
    NONE = "none"
    LEGACY = "mklove"
    DECLARATIVE = "cmake"


@dataclass(frozen=True)
class LinkDecision:
    name: str
    kind: LinkKind
    link_names: tuple = ()
    include_path: str | None = None
    lib_path: str | None = None
    version: str | None = None
    reason: str = ""

    def as_dict(self):
        return {
            "name": self.name,
            "kind": self.kind.value,
            "link_names": list(self.link_names),
            "include_path": self.include_path,
            "lib_path": self.lib_path,
            "version": self.version,
            "reason": self.reason,
        }


@dataclass(frozen=True)
class BuildPlan:
    """The single resolved outcome of one invocation."""
    flags: frozenset
    library: LinkDecision
    decisions: tuple
    driver: BuildDriver = BuildDriver.NONE

    @property
    def link_kind(self) -> LinkKind:
        return self.library.kind

    @property
    def linked(self):
        """librdkafka followed by every dependency that is not absent."""
        return (self.library,) + tuple(d for d in self.decisions if d.kind is not LinkKind.ABSENT)

    def decision(self, name) -> LinkDecision:
        for decision in self.decisions:
            if decision.name == name:
                return decision
        raise KeyError(name)

    @property
    def include_paths(self):
        return tuple(dict.fromkeys(d.include_path for d in self.linked if d.include_path))

    @property
    def library_paths(self):
        return tuple(dict.fromkeys(d.lib_path for d in self.linked if d.lib_path))

    def as_dict(self):
        return {
            "flags": sorted(self.flags),
            "driver": self.driver.value,
            "link_kind": self.link_kind.value,
            "library": self.library.as_dict(),
            "dependencies": [d.as_dict() for d in self.decisions],
            "include_paths": list(self.include_paths),
            "library_paths": list(self.library_paths),
        }

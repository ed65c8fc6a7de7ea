import os
from abc import ABC, abstractmethod

from ...plan import LinkKind


class BaseResolver(ABC):
    """
    Common interface of the native build drivers.

    A resolver only turns a BuildPlan into commands; running them is the
    builder's job.
    """
    driver = None
    # mklove has no out-of-tree builds, so its sources are copied first.
    copies_source = False

    def __init__(self, plan, config):
        self.plan = plan
        self.config = config

    @classmethod
    @abstractmethod
    def artifact_dirs(cls, config):
        """Returns (include_dir, lib_dir) where the built librdkafka ends up."""

    @abstractmethod
    def get_build_commands(self):
        """Returns a dict with clean/configure/build/install command lists."""

    @property
    def work_dir(self):
        return self.config.source_dir

    def enabled(self, dependency_name):
        return self.plan.decision(dependency_name).kind is not LinkKind.ABSENT

    def dependency_prefixes(self):
        """Install prefixes of every linked dependency, in plan order."""
        prefixes = []
        for decision in self.plan.decisions:
            if decision.kind is LinkKind.ABSENT:
                continue
            for path in (decision.include_path, decision.lib_path):
                if path:
                    prefix = os.path.dirname(path.rstrip(os.sep))
                    if prefix and prefix not in prefixes:
                        prefixes.append(prefix)
        return prefixes

    def build_env(self, base_env=None):
        """CFLAGS/LDFLAGS pointing the native build at the linked dependencies."""
        env = dict(os.environ if base_env is None else base_env)
        cflags = [f"-I{d.include_path}" for d in self.plan.decisions if d.kind is not LinkKind.ABSENT and d.include_path]
        ldflags = [f"-L{d.lib_path}" for d in self.plan.decisions if d.kind is not LinkKind.ABSENT and d.lib_path]
        if cflags:
            env["CFLAGS"] = " ".join(filter(None, [env.get("CFLAGS", "")] + cflags))
        if ldflags:
            env["LDFLAGS"] = " ".join(filter(None, [env.get("LDFLAGS", "")] + ldflags))
        return env

"""
Read-only queries of the host for installed native libraries.

pkg-config is the metadata source; the directories it reports are checked on
disk before they are handed on. A prober caches every answer for its own
lifetime, so one resolution always sees one snapshot of the host.
"""
import os
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from enum import Enum

from .cli_logger import logger
from .registry import REGISTRY
from .utils.command_executor import COMMAND_NOT_FOUND, COMMAND_TIMED_OUT, run_shell_command


class ProbeStatus(Enum):
    FOUND = "found"
    NOT_FOUND = "not-found"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class ProbeResult:
    name: str
    pkg_config_name: str
    status: ProbeStatus
    version: str | None = None
    include_path: str | None = None
    lib_path: str | None = None
    detail: str = ""

    @property
    def found(self):
        return self.status is ProbeStatus.FOUND

    def as_dict(self):
        return {
            "name": self.name,
            "pkg_config_name": self.pkg_config_name,
            "status": self.status.value,
            "version": self.version,
            "include_path": self.include_path,
            "lib_path": self.lib_path,
            "detail": self.detail,
        }


class EnvironmentProber:
    def __init__(self, registry=REGISTRY, timeout=10.0, pkg_config=None):
        self.registry = registry
        self.timeout = timeout
        self.pkg_config = pkg_config or os.environ.get("PKG_CONFIG", "pkg-config")
        self._cache = {}

    def _target(self, name):
        if name == self.registry.library.name:
            return self.registry.library.pkg_config_name, True
        dep = self.registry.dependency(name)
        return dep.pkg_config_name, dep.probeable

    def probe(self, name) -> ProbeResult:
        if name not in self._cache:
            self._cache[name] = self._run_probe(name)
        return self._cache[name]

    def probe_all(self, names):
        """
        Probes several libraries concurrently and returns {name: ProbeResult}.

        All pkg-config calls for one library share a single timeout, so one
        hung call only makes its own library unavailable.
        """
        names = list(dict.fromkeys(names))
        pending = [name for name in names if name not in self._cache]
        if pending:
            results = {}
            with ThreadPoolExecutor(max_workers=len(pending)) as pool:
                futures = {pool.submit(self._run_probe, name): name for name in pending}
                for future in as_completed(futures):
                    name = futures[future]
                    try:
                        results[name] = future.result()
                    except Exception as exc:
                        pkg_name, _ = self._target(name)
                        results[name] = ProbeResult(name, pkg_name, ProbeStatus.UNAVAILABLE, detail=f"probe error: {exc}")
            # Filled after the join; nothing is written while probes run.
            self._cache.update(results)
        return {name: self._cache[name] for name in names}

    def _run_probe(self, name) -> ProbeResult:
        pkg_name, probeable = self._target(name)
        if not probeable:
            return ProbeResult(name, pkg_name, ProbeStatus.UNAVAILABLE,
                               detail=f"{name} cannot be looked up on the host")

        # One deadline covers every pkg-config call made for this library.
        deadline = time.monotonic() + self.timeout
        logger.debug(f"Probing {name} with {self.pkg_config} ({pkg_name})")
        stdout, stderr, returncode = self._pkg_config(["--modversion", pkg_name], deadline)
        if returncode == COMMAND_NOT_FOUND:
            return ProbeResult(name, pkg_name, ProbeStatus.UNAVAILABLE,
                               detail=f"'{self.pkg_config}' is not installed")
        if returncode == COMMAND_TIMED_OUT:
            return ProbeResult(name, pkg_name, ProbeStatus.UNAVAILABLE,
                               detail=f"'{self.pkg_config}' timed out after {self.timeout}s")
        if returncode != 0:
            return ProbeResult(name, pkg_name, ProbeStatus.NOT_FOUND, detail=stderr.strip())

        result = ProbeResult(
            name,
            pkg_name,
            ProbeStatus.FOUND,
            version=stdout.strip() or None,
            include_path=self._existing_dir(pkg_name, "includedir", deadline),
            lib_path=self._existing_dir(pkg_name, "libdir", deadline),
        )
        logger.debug(f"  - {name} {result.version} (include: {result.include_path}, lib: {result.lib_path})")
        return result

    def _pkg_config(self, args, deadline):
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            return "", "probe deadline exceeded", COMMAND_TIMED_OUT
        return run_shell_command([self.pkg_config] + args, timeout=remaining)

    def _existing_dir(self, pkg_name, variable, deadline):
        stdout, _, returncode = self._pkg_config([f"--variable={variable}", pkg_name], deadline)
        if returncode == COMMAND_TIMED_OUT:
            logger.warning(f"pkg-config timed out reading {variable} for {pkg_name}; the path is left out.")
            return None
        value = stdout.strip() if returncode == 0 else ""
        if not value:
            return None
        if not os.path.isdir(value):
            logger.warning(f"pkg-config reports {variable}={value} for {pkg_name}, but it does not exist.")
            return None
        return value

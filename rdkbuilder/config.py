import toml
import os
from dataclasses import dataclass, field
from .cli_logger import logger
from .errors import InvalidConfigFile, InvalidConfigValue

CONFIG_FILE = "rdkbuilder.toml"

# Enabled unless default features are turned off.
DEFAULT_FEATURES = ("libz",)

def read_config_file(path="."):
    """
    Parses rdkbuilder.toml for a resolution.

    A missing file is an empty configuration. A file that exists but cannot
    be read or parsed raises InvalidConfigFile.
    """
    config_path = os.path.join(path, CONFIG_FILE)
    logger.debug(f"Loading configuration from {config_path}")
    if not os.path.exists(config_path):
        return {}
    try:
        with open(config_path, "r") as f:
            return toml.load(f)
    except toml.TomlDecodeError as e:
        raise InvalidConfigFile(config_path, f"not valid TOML ({e})") from e
    except IOError as e:
        raise InvalidConfigFile(config_path, e) from e

def load_config(path="."):
    try:
        return read_config_file(path)
    except InvalidConfigFile as e:
        logger.error(f"Error loading configuration: {e}")
        logger.info("Please check the file's format and permissions.")
    return {}

def save_config(config, path="."):
    config_path = os.path.join(path, CONFIG_FILE)
    logger.debug(f"Saving configuration to {config_path}")
    try:
        with open(config_path, "w") as f:
            toml.dump(config, f)
    except IOError as e:
        logger.error(f"Error saving configuration to {config_path}: {e}")
        logger.info("Please check file permissions and ensure the directory is writable.")
        return False
    return True


def _split_features(raw, key="build.features"):
    """
    Accepts either a list of names or a table of name -> bool.

    Returns (enabled, declared). Names declared as false still count as
    declared so that a misspelled flag is rejected even when it is off.
    """
    if raw is None:
        return (), ()
    if isinstance(raw, str):
        raw = [name for name in raw.replace(",", " ").split() if name]
    if isinstance(raw, dict):
        for name, value in raw.items():
            if not isinstance(value, bool):
                raise InvalidConfigValue(f"{key}.{name}", value, "true or false")
        declared = tuple(str(name) for name in raw)
        enabled = tuple(str(name) for name, value in raw.items() if value)
        return enabled, declared
    if not isinstance(raw, (list, tuple)):
        raise InvalidConfigValue(key, raw, "a list of feature names or a table of name = true/false")
    for name in raw:
        if not isinstance(name, str):
            raise InvalidConfigValue(key, name, "a feature name")
    names = tuple(raw)
    return names, names


def _number(key, value, kind, minimum):
    accepted = (int, float) if kind is float else int
    # bool is an int subclass, but never a valid count or duration.
    if isinstance(value, bool) or not isinstance(value, accepted) or value < minimum:
        expected = "a whole number" if kind is int else "a number of seconds"
        raise InvalidConfigValue(key, value, f"{expected} >= {minimum}")
    return kind(value)


@dataclass(frozen=True)
class BuildConfig:
    """Immutable settings for one resolution, threaded through every stage."""
    features: tuple = ()
    declared_features: tuple = ()
    default_features: bool = True
    source_dir: str = "librdkafka"
    out_dir: str = os.path.join("target", "rdkafka")
    vendor_dir: str = "vendor"
    probe_timeout: float = 10.0
    jobs: int = field(default_factory=lambda: os.cpu_count() or 1)

    @property
    def requested_flags(self) -> tuple:
        names = list(self.features)
        if self.default_features:
            names.extend(DEFAULT_FEATURES)
        return tuple(dict.fromkeys(names))

    @property
    def all_declared_flags(self) -> tuple:
        return tuple(dict.fromkeys(self.declared_features + self.requested_flags))

    def vendored_prefix(self, dependency_name: str) -> str:
        return os.path.join(self.vendor_dir, dependency_name)

    @classmethod
    def from_dict(cls, conf, path=".", features=None, default_features=None, **overrides):
        """
        Builds the configuration from a parsed rdkbuilder.toml.

        Command-line values passed as keyword arguments win over the file.
        Relative directories are resolved against the project path. Values of
        the wrong type raise InvalidConfigValue naming the offending key.
        """
        build = (conf or {}).get("build", {})
        if not isinstance(build, dict):
            raise InvalidConfigValue("build", build, "a table")

        if features is None:
            enabled, declared = _split_features(build.get("features"))
        else:
            enabled, declared = _split_features(features, key="--features")

        if default_features is None:
            default_features = build.get("default-features", True)
            if not isinstance(default_features, bool):
                raise InvalidConfigValue("build.default-features", default_features, "true or false")

        def _setting(key, default):
            value = overrides.get(key.replace("-", "_"))
            return value if value is not None else build.get(key, default)

        def _dir(key, default):
            value = _setting(key, default)
            if not isinstance(value, str) or not value:
                raise InvalidConfigValue(f"build.{key}", value, "a directory path")
            return value if os.path.isabs(value) else os.path.normpath(os.path.join(path, value))

        timeout = _number("build.probe-timeout", _setting("probe-timeout", 10.0), float, 0)
        jobs = _number("build.jobs", _setting("jobs", os.cpu_count() or 1), int, 1)

        return cls(
            features=enabled,
            declared_features=declared,
            default_features=default_features,
            source_dir=_dir("source-dir", "librdkafka"),
            out_dir=_dir("out-dir", os.path.join("target", "rdkafka")),
            vendor_dir=_dir("vendor-dir", "vendor"),
            probe_timeout=timeout,
            jobs=jobs,
        )


def load_build_config(path=".", no_default_features=False, **overrides):
    """
    Reads rdkbuilder.toml (if any) and returns a BuildConfig.

    Unlike load_config, a file that cannot be parsed is an error here:
    resolving without it would silently drop the features it asks for.
    """
    if no_default_features:
        overrides["default_features"] = False
    return BuildConfig.from_dict(read_config_file(path), path=path, **overrides)

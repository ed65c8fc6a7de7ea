import os

from ...cli_logger import logger
from ...plan import BuildDriver
from .base_resolver import BaseResolver

# configure --enable-X / --disable-X switch for each optional dependency.
CONFIGURE_SWITCHES = {
    "openssl": "ssl",
    "libsasl2": "gssapi",
    "zlib": "zlib",
    "zstd": "zstd",
    "lz4": "lz4-ext",
    "libcurl": "curl",
}


class MkloveResolver(BaseResolver):
    """librdkafka's own configure script followed by `make libs`, built in a copy of the sources."""
    driver = BuildDriver.LEGACY
    copies_source = True

    @classmethod
    def artifact_dirs(cls, config):
        src = os.path.join(config.out_dir, "librdkafka", "src")
        return src, src

    @property
    def work_dir(self):
        return os.path.join(self.config.out_dir, "librdkafka")

    def configure_args(self):
        args = [f"--prefix={self.config.out_dir}"]
        for decision in self.plan.decisions:
            switch = CONFIGURE_SWITCHES.get(decision.name)
            if switch is None:
                continue
            state = "enable" if self.enabled(decision.name) else "disable"
            args.append(f"--{state}-{switch}")
        return args

    def get_build_commands(self):
        logger.info("  - Generating mklove build commands for librdkafka.")
        configure_cmd = [os.path.join(self.work_dir, "configure")] + self.configure_args()
        build_cmd = ["make", "-j", str(self.config.jobs), "libs"]
        return {
            "clean_command": ["rm", "-rf", self.work_dir],
            "configure_command": configure_cmd,
            "build_command": build_cmd,
            # Linked straight from the build tree.
            "install_command": [],
        }

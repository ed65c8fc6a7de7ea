import os

from ...cli_logger import logger
from ...plan import BuildDriver, LinkKind
from .base_resolver import BaseResolver

# CMake option toggled by each optional dependency.
CMAKE_OPTIONS = {
    "openssl": "WITH_SSL",
    "libsasl2": "WITH_SASL",
    "zlib": "WITH_ZLIB",
    "zstd": "WITH_ZSTD",
    "lz4": "ENABLE_LZ4_EXT",
    "libcurl": "WITH_CURL",
}


class CMakeResolver(BaseResolver):
    """Out-of-tree CMake build installed into the output directory."""
    driver = BuildDriver.DECLARATIVE

    @classmethod
    def artifact_dirs(cls, config):
        return os.path.join(config.out_dir, "include"), os.path.join(config.out_dir, "lib")

    @property
    def build_dir(self):
        return os.path.join(self.config.out_dir, "build")

    def configure_args(self):
        args = [
            f"-DCMAKE_INSTALL_PREFIX={self.config.out_dir}",
            "-DCMAKE_INSTALL_LIBDIR=lib",
            "-DRDKAFKA_BUILD_STATIC=1",
            "-DRDKAFKA_BUILD_TESTS=0",
            "-DRDKAFKA_BUILD_EXAMPLES=0",
        ]
        for decision in self.plan.decisions:
            option = CMAKE_OPTIONS.get(decision.name)
            if option is None:
                continue
            args.append(f"-D{option}={1 if self.enabled(decision.name) else 0}")

        openssl = self.plan.decision("openssl")
        if openssl.kind is LinkKind.STATIC_VENDORED and openssl.lib_path:
            args.append(f"-DOPENSSL_ROOT_DIR={os.path.dirname(openssl.lib_path.rstrip(os.sep))}")

        prefixes = self.dependency_prefixes()
        if prefixes:
            args.append(f"-DCMAKE_PREFIX_PATH={';'.join(prefixes)}")
        return args

    def get_build_commands(self):
        logger.info("  - Generating CMake build commands for librdkafka.")
        configure_cmd = [
            "cmake",
            "-S", self.config.source_dir,
            "-B", self.build_dir,
        ] + self.configure_args()
        build_cmd = ["cmake", "--build", self.build_dir, "--", "-j", str(self.config.jobs)]
        install_cmd = ["cmake", "--install", self.build_dir]
        clean_cmd = ["rm", "-rf", self.build_dir]
        return {
            "clean_command": clean_cmd,
            "configure_command": configure_cmd,
            "build_command": build_cmd,
            "install_command": install_cmd,
        }

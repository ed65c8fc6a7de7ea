import os
import shutil

from .cli_logger import logger
from .errors import BuildDriverFailed
from .plan import LinkKind
from .status_codes import check_coverage, scan_header
from .utils.build_system_resolver import get_resolver
from .utils.command_executor import run_shell_command

BUILD_STEPS = ("configure", "build", "install")


def check_status_codes(source_dir):
    """
    Verifies that every error code in the vendored rdkafka.h has an ErrorKind.

    Raises UncoveredStatusCodes when the header documents a code the mapper
    does not know. Returns False if the header is missing.
    """
    header = os.path.join(source_dir, "src", "rdkafka.h")
    if not os.path.isfile(header):
        logger.warning(f"{header} not found; skipping the status code coverage check.")
        return False
    with open(header, "r", encoding="utf-8", errors="ignore") as f:
        count = check_coverage(scan_header(f.read()))
    logger.info(f"  - All {count} native status codes in {header} are mapped.")
    return True


def _warn_missing_vendored(plan):
    for decision in plan.decisions:
        if decision.kind is LinkKind.STATIC_VENDORED and decision.lib_path and not os.path.isdir(decision.lib_path):
            logger.warning(f"Vendored {decision.name} expected in {decision.lib_path}, which does not exist yet.")


def _copy_sources(source_dir, work_dir):
    logger.info(f"  - Copying librdkafka sources to {work_dir}")
    shutil.copytree(source_dir, work_dir, dirs_exist_ok=True, ignore=shutil.ignore_patterns(".git"))


def _run_step(step, command, env, cwd):
    logger.info(f"  - Running {step}: {' '.join(command)}")
    stdout, stderr, returncode = run_shell_command(command, env=env, cwd=cwd)
    if returncode != 0:
        logger.error(f"{step.capitalize()} failed for librdkafka (Exit Code: {returncode}):")
        if stdout:
            logger.error(f"Stdout:\n{stdout}")
        if stderr:
            logger.error(f"Stderr:\n{stderr}")
        raise BuildDriverFailed(step, returncode)
    if stdout:
        logger.debug(stdout)


def build_native_library(plan, config, clean=False, check_codes=True):
    """
    Runs the native build driver chosen for plan.

    Does nothing for a system-linked librdkafka. Raises BuildDriverFailed on
    the first step that exits non-zero.
    """
    resolver = get_resolver(plan, config)
    if resolver is None:
        logger.info("Linking against the system librdkafka; nothing to build.")
        return True

    if not os.path.isdir(config.source_dir):
        raise FileNotFoundError(f"librdkafka sources not found at {config.source_dir}")

    logger.info(f"Building librdkafka with {plan.driver.value}...")
    if check_codes:
        check_status_codes(config.source_dir)
    _warn_missing_vendored(plan)

    os.makedirs(config.out_dir, exist_ok=True)
    commands = resolver.get_build_commands()
    env = resolver.build_env()

    if clean and commands["clean_command"]:
        _run_step("clean", commands["clean_command"], env, config.out_dir)
    if resolver.copies_source:
        _copy_sources(config.source_dir, resolver.work_dir)

    for step in BUILD_STEPS:
        command = commands[f"{step}_command"]
        if command:
            _run_step(step, command, env, resolver.work_dir)

    logger.success(f"  - Successfully built librdkafka into {plan.library.lib_path}.")
    return True

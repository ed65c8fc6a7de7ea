import click
import json
from .. import config as config_module
from ..cli_logger import logger
from ..decorators import handle_exceptions
from ..prober import EnvironmentProber, ProbeStatus
from ..registry import REGISTRY

@click.command()
@click.argument("names", nargs=-1)
@click.option("--json", "as_json", is_flag=True, help="Print the results as JSON.")
@click.option("--probe-timeout", type=float, default=None, help="Seconds allowed per pkg-config call.")
@click.pass_context
@handle_exceptions
def probe(ctx, names, as_json, probe_timeout):
    """Look up librdkafka and its optional dependencies on this system.

    NAMES: libraries to probe (default: all of them).
    """
    conf = config_module.load_build_config(ctx.obj["path"], probe_timeout=probe_timeout)
    known = [REGISTRY.library.name] + [dep.name for dep in REGISTRY.dependencies]
    names = list(names) or known
    for name in names:
        if name not in known:
            raise click.BadParameter(f"unknown library '{name}'. Known: {', '.join(known)}", param_hint="NAMES")

    prober = EnvironmentProber(REGISTRY, timeout=conf.probe_timeout)
    results = prober.probe_all(names)

    if as_json:
        click.echo(json.dumps([results[name].as_dict() for name in names], indent=4))
        return

    for name in names:
        result = results[name]
        if result.found:
            logger.success(f"{name} {result.version or '(unknown version)'}")
            if result.include_path:
                logger.step_info(f"include: {result.include_path}", indent=4)
            if result.lib_path:
                logger.step_info(f"lib:     {result.lib_path}", indent=4)
        elif result.status is ProbeStatus.NOT_FOUND:
            logger.warning(f"{name}: not found ({result.detail or result.pkg_config_name})")
        else:
            logger.warning(f"{name}: probe unavailable ({result.detail})")

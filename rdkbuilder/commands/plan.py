import click
import json
from .. import config as config_module
from ..cli_logger import logger
from ..decorators import build_options, handle_exceptions
from ..plan import LinkKind
from ..resolver import resolve

@click.command()
@build_options
@click.option("--json", "as_json", is_flag=True, help="Print the plan as JSON.")
@click.pass_context
@handle_exceptions
def plan(ctx, as_json, **options):
    """Resolve the feature flags into a build plan and show it."""
    conf = config_module.load_build_config(ctx.obj["path"], **options)
    build_plan = resolve(conf)

    if as_json:
        click.echo(json.dumps(build_plan.as_dict(), indent=4))
        return

    logger.info(f"librdkafka: {build_plan.link_kind.value} (driver: {build_plan.driver.value})")
    for decision in build_plan.decisions:
        if decision.kind is LinkKind.ABSENT:
            logger.step_info(f"{decision.name:<10} absent", indent=2)
            continue
        version = f" {decision.version}" if decision.version else ""
        logger.step_info(f"{decision.name:<10} {decision.kind.value}{version} ({decision.reason})", indent=2)

import click
import shlex
from .. import config as config_module
from .. import builder
from .. import emitter
from ..cli_logger import logger
from ..decorators import build_options, handle_exceptions
from ..resolver import resolve

@click.command()
@build_options
@click.option("--clean", is_flag=True, help="Remove previous build output first.")
@click.option("--skip-code-check", is_flag=True, help="Do not check rdkafka.h status codes against the mapper.")
@click.pass_context
@handle_exceptions
def build(ctx, clean, skip_code_check, **options):
    """Resolve the plan, build librdkafka if needed and print the link directives."""
    conf = config_module.load_build_config(ctx.obj["path"], **options)
    build_plan = resolve(conf)
    builder.build_native_library(build_plan, conf, clean=clean, check_codes=not skip_code_check)

    logger.success("Link directives:")
    click.echo(shlex.join(emitter.to_flags(emitter.emit(build_plan))))

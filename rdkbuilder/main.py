import click
from .cli_logger import logger
from .commands import *


@click.group()
@click.option("--path", "-p", default=".", help="Path to the project directory.")
@click.option("--verbose", "-v", is_flag=True, help="Show debug output.")
@click.pass_context
def cli(ctx, path, verbose):
    """rdkbuilder: resolve how librdkafka is built and linked."""
    logger.set_verbose(verbose)
    ctx.obj = {"path": path}

cli.add_command(features)
cli.add_command(probe)
cli.add_command(plan)
cli.add_command(directives)
cli.add_command(build)
cli.add_command(check_codes)
cli.add_command(error_kind)
cli.add_command(config)
cli.add_command(log)
cli.add_command(version)

if __name__ == '__main__':
    cli()

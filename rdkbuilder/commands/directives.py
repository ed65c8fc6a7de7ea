import click
import json
import shlex
from .. import config as config_module
from .. import emitter
from ..decorators import build_options, handle_exceptions
from ..resolver import resolve

@click.command()
@build_options
@click.option("--format", "output_format", type=click.Choice(["flags", "env", "json"]), default="flags",
              help="Output style for the directives.")
@click.pass_context
@handle_exceptions
def directives(ctx, output_format, **options):
    """Print the compiler and linker directives for the resolved plan."""
    conf = config_module.load_build_config(ctx.obj["path"], **options)
    emitted = emitter.emit(resolve(conf))

    if output_format == "json":
        click.echo(json.dumps(emitter.as_dicts(emitted), indent=4))
    elif output_format == "env":
        for key, value in emitter.to_env(emitted).items():
            click.echo(f"{key}={shlex.quote(value)}")
    else:
        click.echo(shlex.join(emitter.to_flags(emitted)))

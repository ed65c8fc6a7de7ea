import click
import os
import json
from .. import config as config_module
from ..cli_logger import logger
from ..errors import InvalidConfigFile

def _load_or_complain(ctx):
    conf = config_module.load_config(path=ctx.obj["path"])
    if not conf:
        logger.error("Error: No rdkbuilder.toml found. Create one with 'rdkbuilder config set build.features ssl'.")
    return conf

@click.group()
@click.pass_context
def config(ctx):
    """View or edit the rdkbuilder.toml configuration file."""
    pass

@config.command()
@click.pass_context
def view(ctx):
    """View the contents of the rdkbuilder.toml file."""
    if not _load_or_complain(ctx):
        return
    config_file_path = os.path.join(ctx.obj["path"], config_module.CONFIG_FILE)
    try:
        with open(config_file_path, 'r') as f:
            click.echo(f.read())
    except IOError as e:
        logger.error(f"Error reading rdkbuilder.toml at {config_file_path}: {e}")
        logger.info("Please check file permissions.")

@config.command(name="list")
@click.pass_context
def list_values(ctx):
    """List all configuration keys and values."""
    conf = _load_or_complain(ctx)
    if not conf:
        return
    click.echo(json.dumps(conf, indent=4))

@config.command()
@click.argument('key')
@click.pass_context
def get(ctx, key):
    """Get a value from the rdkbuilder.toml file."""
    conf = _load_or_complain(ctx)
    if not conf:
        return

    value = conf
    try:
        for k in key.split('.'):
            value = value[k]
    except (KeyError, TypeError):
        logger.error(f"Error: Key '{key}' not found in rdkbuilder.toml")
        return
    click.echo(json.dumps(value) if isinstance(value, (list, dict)) else value)

def _parse_value(key, value):
    # Feature lists are stored as TOML arrays.
    if key.split('.')[-1] == "features":
        return [name for name in value.replace(",", " ").split() if name]
    lowered = value.lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        return value

@config.command(name="set")
@click.argument('key')
@click.argument('value')
@click.pass_context
def set_value(ctx, key, value):
    """Set a value in the rdkbuilder.toml file (creating it if needed)."""
    try:
        conf = config_module.read_config_file(path=ctx.obj["path"])
    except InvalidConfigFile as e:
        # The broken file is left untouched.
        logger.error(f"Error: {e}. Fix the file before changing it with 'config set'.")
        return

    keys = key.split('.')
    d = conf
    for k in keys[:-1]:
        d = d.setdefault(k, {})
    d[keys[-1]] = _parse_value(key, value)

    if config_module.save_config(conf, path=ctx.obj["path"]):
        logger.info(f"Set '{key}' to '{value}'")

@config.command()
@click.argument('key')
@click.pass_context
def unset(ctx, key):
    """Remove a key from the rdkbuilder.toml file."""
    conf = _load_or_complain(ctx)
    if not conf:
        return

    keys = key.split('.')
    d = conf
    try:
        for k in keys[:-1]:
            d = d[k]
        del d[keys[-1]]
    except (KeyError, TypeError):
        logger.error(f"Error: Key '{key}' not found in rdkbuilder.toml")
        return
    if config_module.save_config(conf, path=ctx.obj["path"]):
        logger.info(f"Unset '{key}'")

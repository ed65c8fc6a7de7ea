import click
import importlib.metadata
from ..cli_logger import logger
from ..status_codes import CATALOG_VERSION

@click.command()
def version():
    """Print the version of rdkbuilder and the librdkafka version it targets."""
    try:
        ver = importlib.metadata.version("rdkbuilder")
    except importlib.metadata.PackageNotFoundError:
        logger.error("Error: Could not determine the version of rdkbuilder. Is it installed correctly?")
        return
    click.echo(f"rdkbuilder {ver} (librdkafka {CATALOG_VERSION})")

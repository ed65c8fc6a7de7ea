import functools
import click
import sys
from .cli_logger import logger
from .errors import ConfigError, UncoveredStatusCodes

def handle_exceptions(func):
    """A decorator to handle common exceptions for CLI commands."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except click.exceptions.Exit:
            raise
        except click.ClickException:
            raise
        except click.Abort:
            logger.warning("\nCommand aborted by user.")
            raise click.exceptions.Exit(1)
        except (ConfigError, UncoveredStatusCodes) as e:
            # Expected failures: the message says what to fix.
            logger.error(str(e))
            raise click.exceptions.Exit(1)
        except FileNotFoundError as e:
            logger.error(f"Error: File not found - {e}")
            logger.exception(*sys.exc_info())
            raise click.exceptions.Exit(1)
        except Exception as e:
            logger.error(f"\nAn unexpected error occurred: {e}")
            logger.exception(*sys.exc_info())
            raise click.exceptions.Exit(1)
    return wrapper


def build_options(func):
    """Options shared by every command that resolves a build plan."""
    options = [
        click.option("--features", "-F", default=None,
                     help="Comma or space separated feature flags (overrides rdkbuilder.toml)."),
        click.option("--no-default-features", is_flag=True, help="Do not enable the default features."),
        click.option("--source-dir", default=None, help="librdkafka source directory."),
        click.option("--out-dir", default=None, help="Directory the native build writes to."),
        click.option("--vendor-dir", default=None, help="Directory holding vendored dependencies."),
        click.option("--probe-timeout", type=float, default=None, help="Seconds allowed per pkg-config call."),
    ]
    for option in reversed(options):
        func = option(func)
    return func

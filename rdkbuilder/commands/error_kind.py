import click
from ..status_codes import to_error_kind

@click.command("error-kind", context_settings={"ignore_unknown_options": True})
@click.argument("codes", nargs=-1, type=int, required=True)
def error_kind(codes):
    """Translate native librdkafka status codes into error kinds."""
    for code in codes:
        kind = to_error_kind(code)
        symbol = f" ({kind.symbol})" if kind.symbol else ""
        click.echo(f"{code}: {kind.name}{symbol}")

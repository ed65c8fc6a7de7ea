import click
from ..cli_logger import logger
from ..decorators import handle_exceptions
from ..status_codes import CATALOG_VERSION, check_coverage, load_bundled_catalog, scan_header

@click.command("check-codes")
@click.option("--header", type=click.Path(exists=True, dir_okay=False), default=None,
              help="rdkafka.h to check (default: the bundled catalog).")
@handle_exceptions
def check_codes(header):
    """Fail if librdkafka defines status codes that have no ErrorKind."""
    if header:
        with open(header, "r", encoding="utf-8", errors="ignore") as f:
            catalog = scan_header(f.read())
        source = header
    else:
        catalog = load_bundled_catalog()
        source = f"bundled librdkafka {CATALOG_VERSION} catalog"

    if not catalog:
        logger.warning(f"No RD_KAFKA_RESP_ERR_* codes found in {source}.")
        return
    count = check_coverage(catalog)
    logger.success(f"All {count} status codes in {source} are mapped.")

"""
Точка входа: поиск бизнес-карты с промо-ставкой 0% на сайте банка.

Пример:
  offer-finder --bank="Example Bank"
"""
import asyncio
import sys
import traceback

import click
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from offer_finder import __version__
from offer_finder.config import AppConfig, ConfigurationError, validate_bank_name
from offer_finder.services.logger_service import LoggerService
from offer_finder.services.lookup_service import OfferLookupService

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg="red", err=True)
    sys.exit(1)


@click.command(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, "--version", "-v", message="offer-finder, version %(version)s")
@click.option("--bank", "bank", default=None, help="Название банка для поиска в реестре.")
@click.option("--headed", is_flag=True, default=False, help="Показывать окно браузера.")
@click.option(
    "--timeout",
    "timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Таймаут операций браузера по умолчанию, секунд (override BROWSER_TIMEOUT).",
)
def cli(bank, headed, timeout):
    """Найти сайт банка и проверить его на бизнес-карту с 0% APR."""
    try:
        bank_name = validate_bank_name(bank)
        config = AppConfig()
    except ConfigurationError as e:
        print_error(f"Configuration error: {e}")

    if headed:
        config.browser.headless = False
    if timeout is not None:
        config.browser.timeout = timeout

    logger = LoggerService()
    service = OfferLookupService(config, logger=logger)

    try:
        result = asyncio.run(service.lookup(bank_name))

    except KeyboardInterrupt:
        click.echo("\nInterrupted by user")
        sys.exit(0)

    except PlaywrightTimeoutError as e:
        first_line = str(e).splitlines()[0] if str(e) else "timeout"
        print_error(f"Navigation timed out: {first_line}")

    except Exception as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        traceback.print_exc()
        sys.exit(1)

    if result.verdict is not None:
        status = "FOUND" if result.verdict.found else "NOT FOUND"
        click.echo(f"Result: {status} ({result.verdict.analyzed_url})")


def main():
    cli()


if __name__ == "__main__":
    main()

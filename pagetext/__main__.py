"""CLI entry point: python -m pagetext URL [options]

Writes the extracted text to stdout and nothing else.  Exit codes:

    0  text written
    1  missing or non-https URL
    2  navigation or extraction failed (diagnostic on stderr)
    3  page never became readerable within the total timeout
    4  a site strategy's own deadline fired
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from rich.console import Console
from rich.logging import RichHandler

from pagetext.errors import InvalidInputError, PageTextError, TimeoutExhaustedError
from pagetext.items import ExtractionRequest
from pagetext.query import fetch_text_async
from pagetext.settings import Settings

logger = logging.getLogger("pagetext")

EXIT_OK = 0
EXIT_FAILURE = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pagetext",
        description="Render an https:// page in headless Chromium and print its main text.",
    )
    parser.add_argument("url", nargs="?", default=None, metavar="URL",
                        help="Page to extract (must start with https://)")
    parser.add_argument("--onload-timeout", type=float, default=None, metavar="SECONDS",
                        help="First readiness check at the load event or after this "
                             "many seconds (default: 5, env PAGETEXT_ONLOAD_TIMEOUT)")
    parser.add_argument("--total-timeout", type=float, default=None, metavar="SECONDS",
                        help="Second and last readiness check at this many seconds "
                             "(default: 12, env PAGETEXT_TOTAL_TIMEOUT)")
    parser.add_argument("--log-level", default=None,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        metavar="{DEBUG,INFO,WARNING,ERROR}",
                        help="Logging level for stderr (default: WARNING, env PAGETEXT_LOG_LEVEL)")
    return parser


def _configure_logging(level: str) -> None:
    """Send log records to stderr through Rich; stdout carries only page text."""
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    logging.basicConfig(level=level, format="%(message)s", handlers=[handler], force=True)


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    settings = Settings.from_env().override(
        onload_timeout=args.onload_timeout,
        total_timeout=args.total_timeout,
        log_level=args.log_level,
    )
    _configure_logging(settings.log_level)

    try:
        request = ExtractionRequest.from_url(args.url)
        result = asyncio.run(fetch_text_async(request.url, settings=settings))
    except (InvalidInputError, TimeoutExhaustedError) as exc:
        logger.info("%s", exc)
        return exc.exit_code
    except PageTextError as exc:
        logger.error("%s", exc)
        return exc.exit_code
    except KeyboardInterrupt:
        return EXIT_FAILURE
    except Exception:
        logger.exception("Extraction of %s failed", args.url)
        return EXIT_FAILURE

    sys.stdout.write(result.text)
    sys.stdout.flush()
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())

"""pagetext - print the readable text of any https:// page.

Quick single-URL usage::

    from pagetext import fetch_text

    result = fetch_text("https://example.com/blog/some-post")
    print(result.text)

Site overrides::

    from pagetext import SelectorStrategy, default_strategy_table, fetch_text

    table = default_strategy_table().with_entry(
        "https://example.org/", SelectorStrategy("#story", name="example_org"),
    )
    fetch_text("https://example.org/news/1", table=table)
"""

from pagetext.errors import (
    ExtractionError,
    InvalidInputError,
    NavigationError,
    PageTextError,
    StrategyDeadlineError,
    TimeoutExhaustedError,
)
from pagetext.items import ExtractionRequest, ExtractionResult, NavigationOutcome
from pagetext.query import Extractor, fetch_text, fetch_text_async
from pagetext.settings import Settings
from pagetext.strategies import (
    DefaultStrategy,
    ExtractionStrategy,
    FrameStrategy,
    PdfStrategy,
    SelectorStrategy,
    StrategyTable,
    default_strategy_table,
    resolve,
)

__version__ = "0.1.0"
__all__ = [
    "DefaultStrategy",
    "ExtractionError",
    "ExtractionRequest",
    "ExtractionResult",
    "ExtractionStrategy",
    "Extractor",
    "FrameStrategy",
    "InvalidInputError",
    "NavigationError",
    "NavigationOutcome",
    "PageTextError",
    "PdfStrategy",
    "SelectorStrategy",
    "Settings",
    "StrategyDeadlineError",
    "StrategyTable",
    "TimeoutExhaustedError",
    "default_strategy_table",
    "fetch_text",
    "fetch_text_async",
    "resolve",
]

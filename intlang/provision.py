"""
The :py:mod:`intlang.provision` module creates the ``MediaWiki:Lang`` pages
which make ``{{int:lang}}`` expand to the code of the user's interface
language.

For every language known to the wiki, one page is created:
``MediaWiki:Lang`` for the content language and ``MediaWiki:Lang/<code>`` for
all other languages, each containing just the language code. Pages which exist
already are never overwritten.
"""

import asyncio
import enum
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import IO, Iterable, Iterator

from intlang import __url__
from intlang.client import API, APIError

logger = logging.getLogger(__name__)

__all__ = [
    "CreateResult",
    "CreateStatus",
    "collect_language_codes",
    "create_lang_page",
    "gather_languages",
    "lang_page_title",
    "provision",
    "site_content_language",
]

BASE_TITLE = "MediaWiki:Lang"
SUMMARY = f"MediaWiki:Lang ({{{{int:lang}}}}) setup ({__url__})"


class CreateStatus(enum.Enum):
    CREATED = enum.auto()
    ALREADY_EXISTS = enum.auto()
    FAILED = enum.auto()


class CreateResult:
    """
    Outcome of a single :py:func:`create_lang_page` call.

    :param CreateStatus status: what happened to the page
    :param str title: title of the page
    :param APIError error: the error of a ``FAILED`` attempt
    """

    def __init__(
        self, status: CreateStatus, title: str, error: APIError | None = None
    ):
        self.status = status
        self.title = title
        self.error = error

    def __repr__(self) -> str:
        return f"<CreateResult {self.status.name} [[{self.title}]]>"


def collect_language_codes(api: API) -> Iterator[str]:
    """
    Yields the codes of all languages known to the wiki, in the order of the
    API response. The query continuation is followed until the server stops
    returning the ``continue`` object.
    """
    for snippet in api.query_continue(meta="languageinfo", liprop="code"):
        for language in snippet.get("languageinfo", {}).values():
            yield language["code"]


def site_content_language(api: API) -> str:
    """
    Returns the code of the wiki's content language.
    """
    return api.site.content_language


def gather_languages(api: API) -> tuple[list[str], str]:
    """
    Fetches the language codes and the content language of the wiki
    concurrently. If either request fails, its exception is propagated.

    :returns: a ``(language_codes, content_language)`` tuple
    """

    async def async_exec() -> tuple[list[str], str]:
        with ThreadPoolExecutor(max_workers=2) as executor:
            loop = asyncio.get_running_loop()
            codes, content_language = await asyncio.gather(
                loop.run_in_executor(
                    executor, lambda: list(collect_language_codes(api))
                ),
                loop.run_in_executor(executor, site_content_language, api),
            )
        return codes, content_language

    return asyncio.run(async_exec())


def lang_page_title(language_code: str, content_language: str) -> str:
    if language_code == content_language:
        return BASE_TITLE
    return f"{BASE_TITLE}/{language_code}"


def create_lang_page(api: API, title: str, language_code: str) -> CreateResult:
    """
    Creates one ``MediaWiki:Lang`` page with ``language_code`` as its content.

    API errors are turned into a :py:class:`CreateResult`: a lone
    ``articleexists`` error means the page is already there, any other API
    error is reported as ``FAILED``. Transport errors (:py:exc:`httpx.HTTPError`)
    are not caught.
    """
    try:
        api.create(
            title,
            language_code,
            SUMMARY,
            bot=True,
            watchlist="unwatch",
        )
    except APIError as e:
        if e.codes == ["articleexists"]:
            return CreateResult(CreateStatus.ALREADY_EXISTS, title)
        return CreateResult(CreateStatus.FAILED, title, e)
    return CreateResult(CreateStatus.CREATED, title)


def provision(
    api: API,
    language_codes: Iterable[str],
    content_language: str,
    stdout: IO[str],
) -> list[CreateResult]:
    """
    Creates the ``MediaWiki:Lang`` pages for ``language_codes``, one at a
    time and in the given order. Progress is printed to ``stdout``.

    The first failure other than an existing page aborts the loop by raising
    the corresponding :py:class:`APIError`.

    :returns: the results of all attempts
    """
    results = []
    for language_code in language_codes:
        title = lang_page_title(language_code, content_language)
        print(f"Creating {title}...", file=stdout, flush=True)
        result = create_lang_page(api, title, language_code)
        if result.status is CreateStatus.ALREADY_EXISTS:
            print(f"Skipping {title}, exists already.", file=stdout, flush=True)
        elif result.status is CreateStatus.FAILED:
            logger.error(f"Failed to create page [[{title}]], aborting.")
            if result.error is not None:
                raise result.error
            raise RuntimeError(f"Failed to create page [[{title}]]")
        results.append(result)

    created = sum(1 for r in results if r.status is CreateStatus.CREATED)
    logger.info(
        f"Created {created} page(s), skipped {len(results) - created} existing page(s)."
    )
    return results

"""
Command line interface of setup-int-lang.

Usage::

    ACCESS_TOKEN=... setup-int-lang.py www.wikifunctions.org

The access token must belong to an OAuth 2 owner-only consumer with the
permission to edit the MediaWiki namespace.

Pages are created at most once per 3 seconds, so a wiki with a few hundred
languages takes 20 minutes or more. Fetching the language list and the content
language takes only a few requests.
"""

import logging
import os
import sys
from contextlib import redirect_stderr, redirect_stdout
from typing import IO, Mapping, Sequence

import intlang.config
from intlang.client import API
from intlang.provision import gather_languages, provision

logger = logging.getLogger(__name__)

__all__ = ["main", "make_api"]

TOKEN_VARIABLE = "ACCESS_TOKEN"


def make_api(domain: str, access_token: str) -> API:
    return API.from_domain(domain, access_token=access_token)


def main(
    argv: Sequence[str] | None = None,
    environ: Mapping[str, str] | None = None,
    stdout: IO[str] | None = None,
    stderr: IO[str] | None = None,
) -> int:
    """
    Runs the whole provisioning: parses ``argv``, reads the access token from
    ``environ``, gathers the languages and creates the pages.

    Configuration errors are reported on ``stderr`` and result in the return
    value 1 before any request is made. Errors from the wiki are propagated.

    :returns: the exit status of the process
    """
    if environ is None:
        environ = os.environ
    if stdout is None:
        stdout = sys.stdout
    if stderr is None:
        stderr = sys.stderr

    argparser = intlang.config.getArgParser(
        description="Creates the MediaWiki:Lang pages for all languages of a wiki.",
    )
    argparser.add_argument(
        "domain",
        help="domain of the wiki, e.g. www.wikifunctions.org",
    )
    try:
        with redirect_stdout(stdout), redirect_stderr(stderr):
            args = intlang.config.parse_args(argparser, argv, log_stream=stderr)
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 1

    access_token = environ.get(TOKEN_VARIABLE)
    if not access_token:
        print(f"{TOKEN_VARIABLE} environment variable must be set!", file=stderr)
        return 1

    api = make_api(args.domain, access_token)
    try:
        language_codes, content_language = gather_languages(api)
        logger.debug(
            f"Found {len(language_codes)} languages, the content language is '{content_language}'"
        )
        provision(api, language_codes, content_language, stdout)
    finally:
        api.session.close()
    return 0

import hashlib
import logging
from typing import Any, Iterator

from intlang.utils import LazyProperty, RateLimited

from .connection import APIError, Connection
from .site import Site

logger = logging.getLogger(__name__)

__all__ = ["API"]


class API(Connection):
    """
    Simple interface to MediaWiki's API.

    :param args: any positional arguments of the Connection object
    :param kwargs: any keyword arguments of the Connection object
    """

    def __init__(self, *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)

    @LazyProperty
    def site(self) -> Site:
        """
        A :py:class:`intlang.client.site.Site` instance for the current wiki.
        """
        return Site(self)

    def query_continue(
        self, params: dict[str, Any] | None = None, **kwargs: Any
    ) -> Iterator[dict[str, Any]]:
        """
        Generator for MediaWiki's `query-continue feature`_.

        :param params:
            same as :py:meth:`intlang.client.connection.Connection.call_api`,
            but ``action`` is always set to ``"query"`` and ``"continue"`` to
            ``""``
        :param kwargs:
            same as :py:meth:`intlang.client.connection.Connection.call_api`
        :yields: from ``"query"`` part of the API response

        .. _`query-continue feature`: https://www.mediawiki.org/wiki/API:Query#Continuing_queries
        """
        if params is None:
            params = kwargs
        elif not isinstance(params, dict):
            raise ValueError("params must be dict or None")
        elif kwargs and params:
            raise ValueError(
                "specifying 'params' and 'kwargs' at the same time is not supported"
            )
        else:
            # create copy before adding action=query
            params = params.copy()
        params["action"] = "query"

        last_continue: dict[str, Any] = {"continue": ""}

        while True:
            # clone the original params to clean up old continue params
            params_copy = params.copy()
            # and update with the last continue -- it may involve multiple params,
            # hence the clean up with params.copy()
            params_copy.update(last_continue)
            result = self.call_api(params_copy, expand_result=False)
            if "query" in result:
                yield result["query"]
            if "continue" not in result:
                break
            last_continue = result["continue"]

    @LazyProperty
    def _csrftoken(self) -> str:
        logger.debug("Requesting new csrftoken...")
        return str(
            self.call_api(action="query", meta="tokens", type="csrf")["tokens"][
                "csrftoken"
            ]
        )

    def call_with_csrftoken(
        self, params: dict[str, Any] | None = None, **kwargs: Any
    ) -> dict[str, Any]:
        """
        A wrapper around :py:meth:`intlang.client.connection.Connection.call_api`
        with automatic management of the `CSRF token`_.

        The token is cached and renewed once when the server rejects it with
        the ``badtoken`` error.

        :param params: same as :py:meth:`intlang.client.connection.Connection.call_api`
        :param kwargs: same as :py:meth:`intlang.client.connection.Connection.call_api`
        :returns: same as :py:meth:`intlang.client.connection.Connection.call_api`

        .. _`CSRF token`: https://www.mediawiki.org/wiki/API:Tokens
        """
        if params is None:
            params = kwargs
        elif not isinstance(params, dict):
            raise ValueError("params must be dict or None")
        elif kwargs and params:
            raise ValueError(
                "specifying 'params' and 'kwargs' at the same time is not supported"
            )
        else:
            # create copy before adding token
            params = params.copy()

        try:
            params["token"] = self._csrftoken
            return self.call_api(params)
        except APIError as e:
            # csrftoken can be used multiple times, but expires after some time,
            # so try to get a new one *once*
            if e.codes != ["badtoken"]:
                raise
            logger.debug("Got 'badtoken' error, resetting the csrftoken")
            del self._csrftoken

        # ensure that the new token is passed, don't catch the exception this time
        params["token"] = self._csrftoken
        return self.call_api(params)

    @RateLimited(1, 3)
    def create(
        self, title: str, text: str, summary: str, **kwargs: Any
    ) -> dict[str, Any]:
        """
        Interface to `API:Edit`_ for creating pages. The ``createonly``
        parameter is always added to the query, so the call fails with the
        ``articleexists`` error instead of overwriting an existing page. This
        method is rate-limited with the
        :py:class:`@RateLimited <intlang.utils.rate.RateLimited>` decorator to
        allow 1 call per 3 seconds.

        :param str title: the title of the page to be created
        :param str text: new page content
        :param str summary: edit summary
        :param kwargs: Additional query parameters, see `API:Edit`_.

        .. _`API:Edit`: https://www.mediawiki.org/wiki/API:Edit
        """
        if not summary:
            raise ValueError("edit summary is mandatory")
        if len(summary) > 255:
            raise ValueError(
                f"the edit summary is too long, maximum is 255 chars (got len('{summary}') == {len(summary)})"
            )

        # md5 hash is used to prevent data corruption during transfer
        md5 = hashlib.md5(text.encode("utf-8")).hexdigest()

        logger.debug(f"Creating page [[{title}]] ...")

        try:
            return self.call_with_csrftoken(
                action="edit",
                title=title,
                md5=md5,
                text=text,
                summary=summary,
                createonly=True,
                **kwargs,
            )
        except APIError as e:
            for error in e.errors:
                ecode = error.get("code")
                einfo = error.get("text")
                logger.debug(
                    f"Failed to create page [[{title}]] due to APIError (code '{ecode}': {einfo})"
                )
            raise

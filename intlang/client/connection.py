"""
The :py:mod:`intlang.client.connection` module provides a low-level interface
for connections to the wiki. The :py:class:`httpx.Client` class from the
:py:mod:`httpx` library is used to manage the headers (including the OAuth
``Authorization`` header) and making HTTP requests.
"""

import copy
import logging
import ssl
from typing import Any, Self, cast

import httpx
import truststore

from intlang import __url__
from intlang.utils import RateLimited

logger = logging.getLogger(__name__)

__all__ = [
    "Connection",
    "APIWrongAction",
    "APIJsonError",
    "APIError",
    "APIExpandResultFailed",
    "USER_AGENT",
]

USER_AGENT = f"setup-int-lang ({__url__})"
API_URL_TEMPLATE = "https://{domain}/w/api.php"

# parameters sent with every call to api.php
DEFAULT_PARAMS = {
    "formatversion": "2",
    "errorformat": "plaintext",
}

GET_ACTIONS = {"query"}
POST_ACTIONS = {"edit"}
API_ACTIONS = GET_ACTIONS | POST_ACTIONS


class Connection:
    """
    The base object handling connection between a wiki and scripts.

    :param str api_url: URL path to the wiki's ``api.php`` entry point
    :param httpx.Client session: session created by :py:meth:`make_session`
    :param dict default_params:
        API parameters sent with every call, :py:data:`DEFAULT_PARAMS` if not
        specified
    """

    def __init__(
        self,
        api_url: str,
        session: httpx.Client,
        default_params: dict[str, str] | None = None,
    ):
        self.api_url = api_url
        self.session = session
        if default_params is None:
            default_params = DEFAULT_PARAMS
        self.default_params = dict(default_params)

    @staticmethod
    def make_session(
        user_agent: str = USER_AGENT,
        access_token: str | None = None,
        timeout: int = 60,
    ) -> httpx.Client:
        """
        Creates a :py:class:`httpx.Client` object for the connection. The
        server certificate is verified against the system certificate store
        (via :py:mod:`truststore`) and TLS 1.2 is the minimum version. Failed
        connections are not retried.

        :param str user_agent: string sent as ``User-Agent`` header to the web server
        :param str access_token:
            OAuth 2 access token sent as a bearer token in the ``Authorization``
            header
        :param int timeout: connection timeout in seconds
        :returns: :py:class:`httpx.Client` object
        """
        headers = {"User-Agent": user_agent}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"

        ssl_context = truststore.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
        ssl_context.minimum_version = ssl.TLSVersion.TLSv1_2

        return httpx.Client(
            transport=httpx.HTTPTransport(verify=ssl_context, retries=0),
            headers=headers,
            # no timeout for waiting for a connection from the pool
            timeout=httpx.Timeout(timeout, pool=None),
        )

    @classmethod
    def from_domain(cls, domain: str, **kwargs: Any) -> Self:
        """
        Construct a connection to the wiki at ``domain``, assuming the usual
        Wikimedia layout of the ``api.php`` entry point.

        :param str domain: hostname of the wiki, e.g. ``www.wikifunctions.org``
        :param kwargs: passed to :py:meth:`make_session`
        :returns: an instance of ``cls``
        """
        session = cls.make_session(**kwargs)
        return cls(API_URL_TEMPLATE.format(domain=domain), session)

    @RateLimited(10, 3)
    def request(
        self, method: str, url: str | httpx.URL, **kwargs: Any
    ) -> httpx.Response:
        """
        Simple HTTP request handler. It is basically a wrapper around
        :py:meth:`httpx.Client.request()` using the established session, so it
        should be used only for connections with ``url`` leading to the same
        site.

        There is no translation of exceptions, the :py:mod:`httpx` exceptions
        (notably :py:exc:`httpx.NetworkError`, :py:exc:`httpx.TimeoutException`
        and :py:exc:`httpx.HTTPStatusError`) should be caught by the caller.
        """
        response = self.session.request(method, url, **kwargs)

        # raise HTTPStatusError for bad requests (4XX client errors and 5XX server errors)
        response.raise_for_status()

        return response

    def call_api(
        self,
        params: dict[str, Any] | None = None,
        *,
        expand_result: bool = True,
        check_warnings: bool = True,
        **kwargs: Any,
    ) -> dict[str, Any]:
        """
        Convenient method to call the ``api.php`` entry point.

        Checks the ``action`` parameter,
        selects correct HTTP request method, handles API errors and warnings.

        Parameters of the call can be passed either as a dict to ``params``, or
        as keyword arguments. ``params`` and ``kwargs`` cannot be specified at
        the same time.

        :param params: dictionary of API parameters
        :param expand_result:
            if ``True``, return only part of the response relevant to the given
            action, otherwise full response is returned
        :param check_warnings:
            if ``True``, the response is investigated and all API warnings are
            output into the logger
        :param kwargs: API parameters passed as keyword arguments
        :returns: a dictionary containing (part of) the API response
        """
        if params is None:
            params = kwargs
        elif not isinstance(params, dict):
            raise ValueError("params must be dict or None")
        elif kwargs and params:
            raise ValueError(
                "specifying 'params' and 'kwargs' at the same time is not supported"
            )

        # work on a copy, the caller's dict is left untouched
        params = copy.deepcopy(params)

        action = params.get("action")
        if action not in API_ACTIONS:
            raise APIWrongAction(str(action), API_ACTIONS)

        for key, value in self.default_params.items():
            params.setdefault(key, value)
        # always request output in the JSON format
        params["format"] = "json"

        # booleans are true when present in the query string
        for key, value in list(params.items()):
            if value is True:
                params[key] = "1"
            elif value is False:
                del params[key]

        if action in POST_ACTIONS:
            # passing `params` to `data` will cause form-encoding to take place,
            # which is necessary when editing long pages
            response = self.request("POST", self.api_url, data=params)
        else:
            response = self.request("GET", self.api_url, params=params)

        try:
            result = response.json()
        except ValueError:
            result = None
        if not isinstance(result, dict):
            raise APIJsonError(
                "Failed to decode server response. Please make "
                "sure that the API is enabled on the wiki and "
                "that the API URL is correct."
            )

        if "errors" in result or "error" in result:
            raise APIError(params, result)
        if check_warnings is True and "warnings" in result:
            msg = f"API warning(s) for query {params}:"
            for warning in _normalize_messages(result["warnings"]):
                msg += "\n* {}".format(warning.get("text", warning.get("*")))
            logger.warning(msg)

        if expand_result is True:
            if action in result:
                return cast(dict[str, Any], result[action])
            else:
                raise APIExpandResultFailed(params, result)
        return result


def _normalize_messages(messages: Any) -> list[dict[str, Any]]:
    # errorformat=plaintext gives a list of {"code", "text", "module"} objects,
    # the legacy format gives a single object or a dict keyed by module
    if isinstance(messages, list):
        return messages
    if "code" in messages or "*" in messages:
        return [messages]
    return [
        dict(message, module=module)
        for module, message in messages.items()
        if isinstance(message, dict)
    ]


class APIWrongAction(Exception):
    """Raised when a wrong API action is specified.

    This is a programming error, it should be fixed in the client code.
    """

    def __init__(self, action: str, available: set[str]):
        self.message = f"{action} (available actions are: {sorted(available)})"

    def __str__(self) -> str:
        return self.message


class APIJsonError(Exception):
    """Raised when json-decoding of server response failed."""

    pass


class APIError(Exception):
    """
    Raised when API response contains ``errors`` (or the legacy ``error``)
    attribute.

    :param params: the query parameters of the failed call
    :param server_response: the full JSON response
    """

    def __init__(self, params: dict[str, Any], server_response: dict[str, Any]):
        self.params = params
        self.server_response = server_response
        if "errors" in server_response:
            self.errors = _normalize_messages(server_response["errors"])
        elif "error" in server_response:
            self.errors = _normalize_messages(server_response["error"])
        else:
            self.errors = []

    @property
    def codes(self) -> list[str]:
        """Codes of all errors in the response, in the server's order."""
        return [error.get("code", "") for error in self.errors]

    def __str__(self) -> str:
        return f"\nquery parameters: {self.params}\nserver response: {self.server_response}"


class APIExpandResultFailed(APIError):
    """Raised when expansion of API query result failed."""

    pass

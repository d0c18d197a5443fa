from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:  # pragma: no cover
    from .api import API


class Meta:
    """
    Base class for lazily fetched ``meta=...`` query modules.

    Subclasses must configure the :py:attr:`module`, :py:attr:`prefix` and
    :py:attr:`properties` attributes. Each property is fetched with a separate
    API query on the first access and cached for the lifetime of the instance.
    """

    module = ""
    prefix = ""
    properties: set[str] = set()

    def __init__(self, api: "API"):
        self._api = api
        self._values: dict[str, Any] = {}

    def fetch(self, prop: str) -> Any:
        """
        Auxiliary method for querying a property.
        """
        data = {
            "action": "query",
            "meta": self.module,
            self.prefix + "prop": prop,
        }
        result = self._api.call_api(data)

        # some modules wrap the properties in their own key, siteinfo does not
        if self.module in result:
            result = result[self.module]

        self._values.update(result)
        # use .get(), some props may never be returned by the API
        return result.get(prop)

    def __getattr__(self, attr: str) -> Any:
        if attr.startswith("_") or attr not in self.properties:
            raise AttributeError(
                f"Invalid attribute: '{attr}'. Valid attributes are: {sorted(self.properties)}"
            )
        if attr not in self._values:
            self.fetch(attr)
        return self._values.get(attr)

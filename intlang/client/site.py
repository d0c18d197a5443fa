from typing import TYPE_CHECKING, Any

from .meta import Meta

if TYPE_CHECKING:  # pragma: no cover
    from .api import API

__all__ = ["Site"]


class Site(Meta):
    """
    The :py:class:`Site` class holds information about the wiki site.

    Valid properties are listed in the :py:attr:`properties` attribute, which is
    accessed by the :py:meth:`__getattr__ <intlang.client.meta.Meta>` method.
    The representation of these properties is the same as returned by the
    `MediaWiki API`_, unless it is overridden by an explicit property of the
    same name in this class.

    All :py:attr:`properties` are evaluated lazily and cached. The cache is
    never automatically invalidated, you should create a new instance for this.

    .. _`MediaWiki API`: https://www.mediawiki.org/wiki/API:Siteinfo
    """

    module = "siteinfo"
    prefix = "si"
    properties = {"general"}

    def __init__(self, api: "API"):
        super().__init__(api)

    @property
    def content_language(self) -> str:
        """
        The code of the wiki's content language (``$wgLanguageCode``).
        """
        general: dict[str, Any] = self.general
        return str(general["lang"])

"""Item icon URL resolution.

The timeline core only threads item names through; renderers call
:func:`icon_url` (or their own :class:`IconResolver`) for every placed card.
Lookups are memoised per item name.
"""

from __future__ import annotations

from collections.abc import Mapping as ABCMapping
from functools import lru_cache
from importlib import resources
from typing import Any, Mapping, Optional

import yaml

from item_timeline.common.immutables import _freeze_dict
from item_timeline.core.cache import DEFAULT_CACHE_SIZE, CacheStats, LRUCache

__all__ = [
    "DEFAULT_URL_TEMPLATE",
    "IconResolver",
    "load_icon_table",
    "default_resolver",
    "icon_url",
]

DEFAULT_URL_TEMPLATE = "https://cdn.cloudflare.steamstatic.com/apps/dota2/images/items/{slug}_lg.png"

_RESOURCE_PACKAGE = "item_timeline.resources"
_RESOURCE_NAME = "data/item_icons.yaml"


def _parse_icon_table(payload: Any, *, source: str) -> tuple[Mapping[str, str], str]:
    if payload is None:
        payload = {}
    if not isinstance(payload, ABCMapping):
        raise ValueError(f"Icon table {source} must be a mapping")
    slugs_raw = payload.get("slugs", {})
    if not isinstance(slugs_raw, ABCMapping):
        raise ValueError(f"Icon table {source} has a non-mapping 'slugs' section")
    slugs = {
        str(name): str(slug).strip()
        for name, slug in slugs_raw.items()
        if slug is not None and str(slug).strip()
    }
    template = payload.get("url_template") or DEFAULT_URL_TEMPLATE
    return _freeze_dict(slugs), str(template)


def load_icon_table(text: str | None = None, *, source: str = "<string>") -> tuple[Mapping[str, str], str]:
    """Return ``(slugs, url_template)`` from YAML ``text`` or the bundled table."""

    if text is None:
        resource = resources.files(_RESOURCE_PACKAGE).joinpath(_RESOURCE_NAME)
        text = resource.read_text(encoding="utf-8")
        source = str(resource)
    try:
        payload = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ValueError(f"Unable to parse icon table {source}: {exc}") from exc
    return _parse_icon_table(payload, source=source)


class IconResolver:
    """Memoising ``item name -> icon URL`` lookup."""

    __slots__ = ("_slugs", "_template", "_cache")

    def __init__(
        self,
        slugs: Optional[Mapping[str, str]] = None,
        *,
        url_template: Optional[str] = None,
        cache_size: int = DEFAULT_CACHE_SIZE,
    ) -> None:
        if slugs is None:
            bundled, bundled_template = load_icon_table()
            slugs = bundled
            url_template = url_template or bundled_template
        self._slugs = _freeze_dict(slugs)
        self._template = url_template or DEFAULT_URL_TEMPLATE
        self._cache: LRUCache[str, Optional[str]] = LRUCache(maxsize=cache_size)

    @property
    def slugs(self) -> Mapping[str, str]:
        return self._slugs

    def _lookup(self, name: str) -> Optional[str]:
        slug = self._slugs.get(name)
        if not slug:
            return None
        return self._template.format(slug=slug)

    def resolve(self, name: str) -> Optional[str]:
        """Return the icon URL for ``name`` or ``None`` when it is unknown."""

        return self._cache.get_or_create(name, lambda: self._lookup(name))

    def __call__(self, name: str) -> Optional[str]:
        return self.resolve(name)

    def clear(self) -> None:
        self._cache.clear()

    def cache_info(self) -> CacheStats:
        return self._cache.stats()


@lru_cache(maxsize=1)
def default_resolver() -> IconResolver:
    """Return the process-wide resolver backed by the bundled icon table."""

    return IconResolver()


def icon_url(name: str) -> Optional[str]:
    return default_resolver().resolve(name)

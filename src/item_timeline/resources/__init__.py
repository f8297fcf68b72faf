"""Bundled resources distributed with the item timeline package."""

from item_timeline.resources.icons import IconResolver, default_resolver, icon_url, load_icon_table

__all__ = ["IconResolver", "default_resolver", "icon_url", "load_icon_table"]

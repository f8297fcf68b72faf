"""Shared helpers used across the item timeline package."""

from item_timeline.common.immutables import _freeze_dict, _freeze_value

__all__ = ["_freeze_value", "_freeze_dict"]

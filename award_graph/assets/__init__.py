"""Dagster assets for the award graph pipeline."""

from __future__ import annotations

from types import ModuleType

from . import award_graph_assets


def iter_asset_modules() -> list[ModuleType]:
    """Return every module that defines assets or asset checks."""
    return [award_graph_assets]

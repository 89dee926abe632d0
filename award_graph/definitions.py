"""Dagster definitions for the award graph pipeline."""

from dagster import (
    AssetSelection,
    Definitions,
    define_asset_job,
    load_asset_checks_from_modules,
    load_assets_from_modules,
)

from . import assets as assets_pkg


asset_modules = assets_pkg.iter_asset_modules()
all_assets = load_assets_from_modules(asset_modules)
all_asset_checks = load_asset_checks_from_modules(asset_modules)

# Extract -> normalize -> entities -> load -> proximity
award_graph_job = define_asset_job(
    name="award_graph_job",
    selection=AssetSelection.all(),
    description="Load the award export into Neo4j and rank institutional proximity",
)

defs = Definitions(
    assets=all_assets,
    asset_checks=all_asset_checks,
    jobs=[award_graph_job],
)

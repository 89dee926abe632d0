"""Tests for the Dagster definitions wiring."""

import pytest

from award_graph.definitions import all_asset_checks, all_assets, award_graph_job, defs


pytestmark = pytest.mark.fast


def test_every_stage_is_an_asset():
    keys = {key.to_user_string() for asset_def in all_assets for key in asset_def.keys}

    assert keys == {
        "raw_award_records",
        "normalized_award_records",
        "award_entities",
        "award_graph_load",
        "institutional_proximity",
    }


def test_subaward_check_registered():
    assert len(all_asset_checks) == 1


def test_job():
    assert award_graph_job.name == "award_graph_job"
    assert defs is not None

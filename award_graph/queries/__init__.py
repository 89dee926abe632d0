"""Read-only connectivity analyses over the award graph."""

from .connectivity import (
    ConnectivityQueries,
    NeighborhoodGraph,
    OrganizationDistance,
    OrganizationProximity,
    filter_top_proximity,
    summarize_proximity,
)


__all__ = [
    "ConnectivityQueries",
    "NeighborhoodGraph",
    "OrganizationDistance",
    "OrganizationProximity",
    "filter_top_proximity",
    "summarize_proximity",
]

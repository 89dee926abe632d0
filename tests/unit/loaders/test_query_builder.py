"""Unit tests for Neo4jQueryBuilder."""

import pytest

from award_graph.loaders.neo4j.query_builder import Neo4jQueryBuilder, identifier


pytestmark = pytest.mark.fast


class TestIdentifier:
    @pytest.mark.parametrize("name", ["Person", "Based_At", "organization_key", "_x1"])
    def test_valid(self, name):
        assert identifier(name) == name

    @pytest.mark.parametrize("name", ["", "Sub-Award", "a b", "x)-[r]-(y", "1abc", None])
    def test_invalid(self, name):
        with pytest.raises(ValueError, match="Invalid Cypher identifier"):
            identifier(name)


class TestNodeQueries:
    def test_find_nodes(self):
        query = Neo4jQueryBuilder.build_find_nodes_query("Person", "name")

        assert "MATCH (n:Person {name: $key_value})" in query
        assert "AS node" in query
        assert "ORDER BY elementId(n)" in query

    def test_create_node(self):
        query = Neo4jQueryBuilder.build_create_node_query("SubAward")

        assert "CREATE (n:SubAward)" in query
        assert "SET n = $properties" in query

    def test_label_injection_rejected(self):
        with pytest.raises(ValueError):
            Neo4jQueryBuilder.build_create_node_query("Person) DETACH DELETE (n")


class TestRelationshipQueries:
    def test_find_is_undirected(self):
        query = Neo4jQueryBuilder.build_find_relationships_query("Based_At")

        assert "MATCH (s)-[r:Based_At]-(t)" in query
        assert "elementId(s) = $source_id" in query
        assert "elementId(t) = $target_id" in query

    def test_create_is_directed(self):
        query = Neo4jQueryBuilder.build_create_relationship_query("Subaward_of")

        assert "CREATE (s)-[r:Subaward_of]->(t)" in query
        assert "AS relationship" in query


class TestTraversalQueries:
    def test_neighborhood(self):
        query = Neo4jQueryBuilder.build_neighborhood_query("Person", "name", 2)

        assert "MATCH (focus:Person {name: $key_value})" in query
        assert "[*1..2]" in query
        assert "AS nodes" in query
        assert "AS relationships" in query

    def test_neighborhood_requires_positive_hops(self):
        with pytest.raises(ValueError):
            Neo4jQueryBuilder.build_neighborhood_query("Person", "name", 0)

    def test_shortest_paths_restricts_types(self):
        query = Neo4jQueryBuilder.build_shortest_paths_query(
            "Organization", ["Based_At", "Awarded_to"], 9
        )

        assert "MATCH (a:Organization), (b:Organization)" in query
        assert "shortestPath((a)-[:Based_At|Awarded_to*..9]-(b))" in query
        assert "Manages" not in query
        assert "length(p) AS length" in query

    def test_shortest_paths_requires_types(self):
        with pytest.raises(ValueError, match="At least one relationship type"):
            Neo4jQueryBuilder.build_shortest_paths_query("Organization", [], 9)


class TestUtilityQueries:
    def test_counts(self):
        assert Neo4jQueryBuilder.build_count_nodes_query() == "MATCH (n) RETURN count(n) AS count"
        assert "(n:Award)" in Neo4jQueryBuilder.build_count_nodes_query("Award")
        assert "[r:Manages]" in Neo4jQueryBuilder.build_count_relationships_query("Manages")

    def test_reset(self):
        assert Neo4jQueryBuilder.build_reset_query() == "MATCH (n) DETACH DELETE n"

    def test_index(self):
        query = Neo4jQueryBuilder.build_index_query("SubAward", "award_number")

        assert query == (
            "CREATE INDEX subaward_award_number IF NOT EXISTS "
            "FOR (n:SubAward) ON (n.award_number)"
        )

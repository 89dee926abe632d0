"""Neo4j query builder for the award graph's Cypher patterns.

Labels, property keys and relationship types cannot be Cypher parameters, so
they are validated as plain identifiers before interpolation. Values always
travel as parameters.
"""

import re
from collections.abc import Iterable


_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

NODE_MAP = "{{id: elementId({v}), label: labels({v})[0], properties: properties({v})}}"
REL_MAP = (
    "{{id: elementId({v}), type: type({v}), source_id: elementId(startNode({v})), "
    "target_id: elementId(endNode({v})), properties: properties({v})}}"
)


def identifier(name: str) -> str:
    """Return `name` if it is safe to interpolate as a label/type/key."""
    if not isinstance(name, str) or not _IDENTIFIER.match(name):
        raise ValueError(f"Invalid Cypher identifier: {name!r}")
    return name


def node_map(var: str) -> str:
    return NODE_MAP.format(v=var)


def rel_map(var: str) -> str:
    return REL_MAP.format(v=var)


class Neo4jQueryBuilder:
    """Builder for the Cypher queries issued by Neo4jClient."""

    @staticmethod
    def build_find_nodes_query(label: str, key_property: str) -> str:
        """Key lookup; rows ordered by element id so 'first match' is stable."""
        return f"""
        MATCH (n:{identifier(label)} {{{identifier(key_property)}: $key_value}})
        RETURN {node_map("n")} AS node
        ORDER BY elementId(n)
        """.strip()

    @staticmethod
    def build_create_node_query(label: str) -> str:
        return f"""
        CREATE (n:{identifier(label)})
        SET n = $properties
        RETURN {node_map("n")} AS node
        """.strip()

    @staticmethod
    def build_find_relationships_query(rel_type: str) -> str:
        """Direction-agnostic lookup of `rel_type` between two nodes."""
        return f"""
        MATCH (s) WHERE elementId(s) = $source_id
        MATCH (t) WHERE elementId(t) = $target_id
        MATCH (s)-[r:{identifier(rel_type)}]-(t)
        RETURN {rel_map("r")} AS relationship
        ORDER BY elementId(r)
        """.strip()

    @staticmethod
    def build_create_relationship_query(rel_type: str) -> str:
        return f"""
        MATCH (s) WHERE elementId(s) = $source_id
        MATCH (t) WHERE elementId(t) = $target_id
        CREATE (s)-[r:{identifier(rel_type)}]->(t)
        SET r = $properties
        RETURN {rel_map("r")} AS relationship
        """.strip()

    @staticmethod
    def build_neighborhood_query(label: str, key_property: str, max_hops: int) -> str:
        """Induced subgraph within `max_hops` of one node.

        Returns no rows when the start node does not exist.
        """
        hops = int(max_hops)
        if hops < 1:
            raise ValueError(f"max_hops must be >= 1, got {max_hops}")
        return f"""
        MATCH (focus:{identifier(label)} {{{identifier(key_property)}: $key_value}})
        WITH focus ORDER BY elementId(focus) LIMIT 1
        OPTIONAL MATCH (focus)-[*1..{hops}]-(m)
        WITH focus, collect(DISTINCT m) AS reached
        WITH [focus] + [x IN reached WHERE x <> focus] AS ns
        UNWIND ns AS a
        OPTIONAL MATCH (a)-[r]->(b)
        WHERE b IN ns
        WITH ns, collect(DISTINCT r) AS rels
        RETURN [n IN ns | {node_map("n")}] AS nodes,
               [r IN rels | {rel_map("r")}] AS relationships
        """.strip()

    @staticmethod
    def build_shortest_paths_query(label: str, rel_types: Iterable[str], max_hops: int) -> str:
        """Shortest path lengths between every ordered pair of `label` nodes.

        Only `rel_types` may be traversed; pairs with no such path within
        `max_hops` produce no row.
        """
        types = "|".join(identifier(t) for t in rel_types)
        if not types:
            raise ValueError("At least one relationship type is required")
        hops = int(max_hops)
        if hops < 1:
            raise ValueError(f"max_hops must be >= 1, got {max_hops}")
        node_label = identifier(label)
        return f"""
        MATCH (a:{node_label}), (b:{node_label})
        WHERE elementId(a) <> elementId(b)
        MATCH p = shortestPath((a)-[:{types}*..{hops}]-(b))
        RETURN {node_map("a")} AS source, {node_map("b")} AS target, length(p) AS length
        ORDER BY elementId(a), elementId(b)
        """.strip()

    @staticmethod
    def build_count_nodes_query(label: str | None = None) -> str:
        pattern = f"(n:{identifier(label)})" if label else "(n)"
        return f"MATCH {pattern} RETURN count(n) AS count"

    @staticmethod
    def build_count_relationships_query(rel_type: str | None = None) -> str:
        pattern = f"[r:{identifier(rel_type)}]" if rel_type else "[r]"
        return f"MATCH ()-{pattern}->() RETURN count(r) AS count"

    @staticmethod
    def build_reset_query() -> str:
        return "MATCH (n) DETACH DELETE n"

    @staticmethod
    def build_index_query(label: str, key_property: str) -> str:
        name = f"{label.lower()}_{key_property}"
        return (
            f"CREATE INDEX {identifier(name)} IF NOT EXISTS "
            f"FOR (n:{identifier(label)}) ON (n.{identifier(key_property)})"
        )

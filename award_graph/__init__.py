"""Award graph: grant-award export to a Neo4j collaboration graph."""

__version__ = "0.1.0"

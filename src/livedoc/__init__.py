"""
Livedoc - living documentation linking features to the code that implements them.

This package provides:
- Feature-level dependency graphs resolved from recorded call graphs
- In-memory and Neo4j backed feature catalogs and invocation ledgers
- Command line access to root graphs, single feature graphs and cycles
"""

__version__ = "0.1.0"

"""
Query Engine - Minimal relational query engine

A single-user engine for SELECT / INSERT / DELETE statements over typed,
schema-described tables persisted as plain CSV files.
"""

__version__ = "0.1.0"

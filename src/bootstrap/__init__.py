"""Composition root for the line sorter.

Picks the storage adapters behind each application port (in-memory or
PostgreSQL), owns the database engine and configures logging. The API
layer reaches infrastructure only through this package.
"""

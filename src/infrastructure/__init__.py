"""
Infrastructure layer - External adapters for the line sorter.

This layer contains:
- PostgreSQL adapters (SQLAlchemy async)
- In-memory stubs for development and testing
- Observability (structured logging, correlation ids)

IMPORT RULES:
- CAN import from: domain, application
- Implements ports defined in application layer
"""

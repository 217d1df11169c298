"""
API layer - FastAPI routes and HTTP concerns for the line sorter.

IMPORT RULES:
- CAN import from: application, domain, config
- Infrastructure is reached only through src.bootstrap
"""

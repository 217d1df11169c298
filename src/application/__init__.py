"""
Application layer - Use cases and orchestration for the line sorter.

This layer contains:
- Application services
- Port definitions (abstract interfaces for infrastructure)

IMPORT RULES:
- CAN import from: domain, config
- CANNOT import from: infrastructure, api
"""

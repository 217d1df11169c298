"""Infrastructure adapters for the line sorter.

Adapters implement the ports defined in the application layer.
"""

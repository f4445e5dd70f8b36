"""Rate limiting adapters.

This package provides a small abstraction layer so the site can start with an
in-memory store and later migrate to Redis or another shared store without
changing the API layer.
"""

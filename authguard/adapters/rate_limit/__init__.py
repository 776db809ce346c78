"""Rate limiting adapters.

This package provides a small abstraction layer so authentication routes can
start with an in-memory limiter and later migrate to a shared store without
changing the HTTP layer.
"""

"""
Boundary layer.

Adapters to the outside world: the persistent document store, the live
vault corpus and the embedding provider.
"""

"""Infrastructure adapters.

Concrete implementations of the domain and application ports: map view
projection, visual registry and operator notices.
"""

"""Link Planner Domain Layer.

This package contains the core business logic organized by bounded contexts:
- geometry: Path distance, Fresnel zone radii and clearance outlines
- network: Towers, links and their consistency invariants
"""

# Imports alphabetized per project style (isort)
from domain import geometry, network

__all__ = ["geometry", "network"]

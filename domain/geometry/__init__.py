"""Geometry Bounded Context.

Responsible for path geometry between towers:
- Value Objects: GeoPoint, ScreenPoint, FresnelProfile
- Ports: ScreenProjector (map view projection)
- Services: distance, fresnel_profile, fresnel_clearance_polygon
"""

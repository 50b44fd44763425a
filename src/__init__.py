"""Application and Infrastructure Layers.

Imported as top-level packages (`application`, `infrastructure`) with
`src` on the import path. These layers orchestrate domain logic and
adapt it to the map surface.
"""

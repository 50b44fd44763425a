#!/usr/bin/env python3
"""Headless walk-through of a planning session.

Places two towers one degree apart on the equator, links them, selects the
link and prints the Fresnel clearance summary. Uses the in-memory renderer
and the logging notifier instead of a map surface.

Usage:
    python scripts/demo_session.py [--frequency GHZ] [--geodesic]

Requirements:
    pip install -e .
"""

from __future__ import annotations

import argparse
import logging

from application.interaction import ToolMode
from application.ports import clearance_visual_id
from application.session import PlannerSession
from application.settings import PlannerSettings
from domain.geometry.value_objects import GeoPoint
from infrastructure.notifications import LoggingNotifier
from infrastructure.projection import WebMercatorProjector
from infrastructure.rendering import InMemoryRenderer


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument(
        "--frequency", type=float, default=5.8, help="Tower frequency in GHz"
    )
    parser.add_argument(
        "--geodesic", action="store_true", help="Draw the view-independent outline"
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO, format="%(levelname)s %(name)s: %(message)s"
    )

    settings = PlannerSettings(
        default_frequency_ghz=args.frequency,
        clearance_geometry="geodesic" if args.geodesic else "screen",
        initial_center=GeoPoint(latitude=0.0, longitude=0.5),
        initial_zoom=9,
    )
    projector = WebMercatorProjector(settings.initial_center, settings.initial_zoom)
    renderer = InMemoryRenderer()

    notifier = LoggingNotifier()
    with PlannerSession.start(renderer, notifier, projector, settings) as session:
        controller = session.controller
        renderer.attach(controller)

        for lon in (0.0, 1.0):
            controller.set_mode(ToolMode.TOWER)
            renderer.click_map(GeoPoint(latitude=0.0, longitude=lon))
        first, second = session.model.towers

        controller.set_mode(ToolMode.LINK)
        renderer.click(first.id)
        renderer.click(second.id)
        (link,) = session.model.links

        controller.set_mode(ToolMode.VIEW)
        renderer.click(link.id)
        props = controller.selection_properties()
        outline = renderer.get(clearance_visual_id(link.id))

        print(f"{props.source_name} <-> {props.target_name}")
        print(f"  distance:        {props.distance_km:.2f} km")
        print(f"  frequency:       {props.frequency_ghz:g} GHz")
        print(f"  max clearance:   {props.max_clearance_radius_m:.2f} m")
        print(f"  outline points:  {len(outline.points) if outline else 0}")


if __name__ == "__main__":
    main()

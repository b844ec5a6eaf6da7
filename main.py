# main.py
import json

from em_route.app.build import build
from em_route.domain.errors import RoutingError
from em_route.services.routing import status_for


def run(cfg: dict | None = None):
    app = build(cfg or {"run_id": "demo", "scheduler": {"interval_ms": 5_000}})
    app.start()
    try:
        start = {"lat": 40.7128, "lng": -74.0060}
        destination = {"lat": 40.7500, "lng": -73.9700}
        try:
            route = app.routes.calculate_route(start, destination)
        except RoutingError as exc:
            print(json.dumps({"status": status_for(exc), "error": str(exc)}))
            return
        print(json.dumps(route.as_dict(), indent=2))

        nearest = app.hospitals.sorted_by_distance(route.destination, emergency_only=True)[:3]
        print(
            json.dumps(
                [{"id": r.hospital.id, "name": r.hospital.name, "distance": r.distance_km} for r in nearest],
                indent=2,
            )
        )
    finally:
        app.stop()


if __name__ == "__main__":
    run()

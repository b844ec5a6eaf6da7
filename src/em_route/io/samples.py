# io/samples.py
# Demo data used when no real network or hospital registry is configured.
from em_route.domain.entities.geography import Coordinate
from em_route.domain.entities.hospital import Hospital


def sample_grid_description(
    grid_size: int = 5,
    spacing_deg: float = 0.01,  # roughly 1 km
    base_lat: float = 40.7128,
    base_lon: float = -74.006,
    highway: str = "residential",
) -> dict:
    """grid_size x grid_size intersections joined by horizontal and vertical ways."""
    nodes = [
        {"id": f"node_{i}_{j}", "lat": base_lat + i * spacing_deg, "lon": base_lon + j * spacing_deg}
        for i in range(grid_size)
        for j in range(grid_size)
    ]
    ways = [
        {
            "id": f"way_h_{i}",
            "nodeIds": [f"node_{i}_{j}" for j in range(grid_size)],
            "tags": {"highway": highway},
        }
        for i in range(grid_size)
    ]
    ways += [
        {
            "id": f"way_v_{j}",
            "nodeIds": [f"node_{i}_{j}" for i in range(grid_size)],
            "tags": {"highway": highway},
        }
        for j in range(grid_size)
    ]
    return {"nodes": nodes, "ways": ways}


def sample_hospitals() -> list[Hospital]:
    rows = [
        ("hospital-1", "City General Hospital", 40.7580, -73.9855, "123 Main St, New York, NY 10001", 500, True, "+1-555-0101"),
        ("hospital-2", "Metropolitan Medical Center", 40.7489, -73.9680, "456 Park Ave, New York, NY 10022", 350, True, "+1-555-0102"),
        ("hospital-3", "Downtown Emergency Clinic", 40.7128, -74.0060, "789 Broadway, New York, NY 10003", 200, True, "+1-555-0103"),
        ("hospital-4", "Riverside Hospital", 40.7614, -73.9776, "321 River Rd, New York, NY 10019", 400, True, "+1-555-0104"),
        ("hospital-5", "Northside Medical Center", 40.7829, -73.9654, "654 North St, New York, NY 10025", 300, True, "+1-555-0105"),
        ("hospital-6", "Eastside Community Hospital", 40.7282, -73.9942, "987 East Ave, New York, NY 10009", 250, False, "+1-555-0106"),
        ("hospital-7", "Westside Regional Hospital", 40.7589, -73.9851, "147 West St, New York, NY 10023", 450, True, "+1-555-0107"),
        ("hospital-8", "Central City Medical", 40.7484, -73.9857, "258 Central Blvd, New York, NY 10018", 380, True, "+1-555-0108"),
    ]  # fmt: skip
    return [
        Hospital(
            id=hid,
            name=name,
            location=Coordinate(lat, lon),
            address=addr,
            capacity=cap,
            emergency_capable=er,
            phone_number=phone,
        )
        for hid, name, lat, lon, addr, cap, er, phone in rows
    ]

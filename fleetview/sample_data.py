"""
Deterministic synthetic fleet documents.

Produces raw documents shaped like the stored ones (camelCase keys, ISO
timestamps) for the `trips` and `users` collections. Used by the CLI demo
mode and by `scripts/generate_data.py` to seed Postgres.
"""

from __future__ import annotations

import random
from datetime import UTC, datetime, timedelta
from typing import Dict, List, Optional

from fleetview.domain.models import TripStatus, UserRole
from fleetview.sources.abstract import RawDocument

CITIES = [
    "Delhi", "Pune", "Agra", "Jaipur", "Mumbai", "Chennai", "Kolkata",
    "Bengaluru", "Hyderabad", "Lucknow", "Ahmedabad", "Surat", "Indore",
]
FIRST_NAMES = ["Aarav", "Diya", "Kabir", "Meera", "Rohan", "Sara", "Vikram", "Anaya", "Arjun", "Isha"]
LAST_NAMES = ["Sharma", "Verma", "Iyer", "Khan", "Patel", "Reddy", "Singh", "Das", "Nair", "Gupta"]


def generate_trips(count: int, seed: int = 42, base: Optional[datetime] = None) -> List[RawDocument]:
    """Trips spread over 120 days around `base`, with a random status each."""
    rng = random.Random(seed)
    base = base or datetime(2025, 1, 1, tzinfo=UTC)
    statuses = [status.value for status in TripStatus]
    trips: List[RawDocument] = []
    for i in range(count):
        start, end = rng.sample(CITIES, 2)
        trip_date = base + timedelta(days=rng.randint(0, 119), hours=rng.randint(6, 20))
        trips.append(
            {
                "id": f"trip-{i + 1:05d}",
                "TripStatus": rng.choice(statuses),
                "startLocation": start,
                "endLocation": end,
                "tripDate": trip_date.isoformat(),
                "vehicleId": f"veh-{rng.randint(1, 40):03d}",
                "distanceKm": round(rng.uniform(20, 1_500), 1),
            }
        )
    return trips


def generate_users(drivers: int, others: int = 0, seed: int = 42) -> List[RawDocument]:
    """`drivers` users with the Driver role, followed by `others` non-driver users."""
    rng = random.Random(seed)
    other_roles = [role.value for role in UserRole if role is not UserRole.DRIVER]
    users: List[RawDocument] = []
    for i in range(drivers + others):
        first, last = rng.choice(FIRST_NAMES), rng.choice(LAST_NAMES)
        users.append(
            {
                "id": f"user-{i + 1:05d}",
                "name": f"{first} {last}",
                "email": f"{first.lower()}.{last.lower()}{i + 1}@fleet.example",
                "phone": f"+91 9{rng.randint(100_000_000, 999_999_999)}",
                "role": UserRole.DRIVER.value if i < drivers else rng.choice(other_roles),
            }
        )
    return users


def generate_documents(
    trips: int = 25, drivers: int = 8, others: int = 2, seed: int = 42
) -> Dict[str, List[RawDocument]]:
    """Both collections keyed by their default names."""
    return {
        "trips": generate_trips(trips, seed=seed),
        "users": generate_users(drivers, others=others, seed=seed),
    }


__all__ = ["CITIES", "generate_documents", "generate_trips", "generate_users"]

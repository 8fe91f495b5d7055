"""Demo data of the planner: three accounts and three legacy bookings.

Run as a script to load both into Postgres (existing ids and e-mails are kept):

    DATABASE_URL=... python -m ferienhaus.operations.seed_demo
"""

import os
import sys
from datetime import date

from ferienhaus.domain.segments import Segment, Status
from ferienhaus.domain.users import User
from ferienhaus.infra.hashing import hash_password


def demo_users() -> list[User]:
    """Accounts for local development only."""
    return [
        User("user1", "Max Mustermann", "max@example.com", "user", hash_password("password123")),
        User("admin1", "Admina Administrator", "admin@example.com", "admin", hash_password("adminpassword")),
        User("user2", "Erika Musterfrau", "erika@example.com", "user", hash_password("password456")),
    ]


def demo_segments(property_id: str) -> list[Segment]:
    # legacy single-segment records: no request group
    return [
        Segment("booking1", None, "user1", "Max Mustermann",
                date(2025, 7, 10), date(2025, 7, 15), Status.CONFIRMED, property_id),
        Segment("booking2", None, "user2", "Erika Musterfrau",
                date(2025, 7, 20), date(2025, 7, 25), Status.RESERVED, property_id),
        Segment("booking3", None, "admin1", "Admina Administrator (für Gast)",
                date(2025, 8, 1), date(2025, 8, 5), Status.CONFIRMED, property_id),
    ]


def main() -> int:
    from ferienhaus.infra.repositories.segments_repository import PostgresSegmentRepository
    from ferienhaus.infra.repositories.users_repository import PostgresUserRepository

    dsn = os.getenv("DATABASE_URL")
    if not dsn:
        print("DATABASE_URL is required", file=sys.stderr)
        return 1
    property_id = os.getenv("PROPERTY_ID", "ferienhaus1")

    users = PostgresUserRepository(dsn=dsn)
    added_users = 0
    for user in demo_users():
        if users.get(user.id) is not None or users.find_by_email(user.email) is not None:
            continue
        users.save(user)
        added_users += 1

    repo = PostgresSegmentRepository(property_id, dsn=dsn)
    with repo.locked() as session:
        existing = session.load_all()
        known = {s.id for s in existing}
        seeded = [s for s in demo_segments(property_id) if s.id not in known]
        session.save_all(existing + seeded)

    print(f"seeded {added_users} users and {len(seeded)} bookings for {property_id}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

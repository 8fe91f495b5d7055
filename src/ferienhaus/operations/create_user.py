"""Create one account in the users table, e.g. the first administrator.

    DATABASE_URL=... NEW_USER_EMAIL=... NEW_USER_NAME=... NEW_USER_PASSWORD=... \
    NEW_USER_ROLE=admin python -m ferienhaus.operations.create_user
"""

import os
import sys

from ferienhaus.domain.errors import BookingError
from ferienhaus.domain.users import UserDirectory


def env(name: str, default: str | None = None) -> str:
    v = os.getenv(name, default)
    if v is None or v.strip() == "":
        raise RuntimeError(f"Missing env var: {name}")
    return v


def main() -> int:
    from ferienhaus.infra.repositories.users_repository import PostgresUserRepository

    try:
        dsn = env("DATABASE_URL")
        email = env("NEW_USER_EMAIL")
        name = env("NEW_USER_NAME")
        password = env("NEW_USER_PASSWORD")
        role = env("NEW_USER_ROLE", "user")
    except RuntimeError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    if role not in ("user", "admin"):
        print(f"NEW_USER_ROLE must be user or admin, got {role}", file=sys.stderr)
        return 1

    directory = UserDirectory(repository=PostgresUserRepository(dsn=dsn))
    try:
        user = directory.register(name, email, password, role=role)  # type: ignore[arg-type]
    except BookingError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    print(f"created {user.role} {user.id}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

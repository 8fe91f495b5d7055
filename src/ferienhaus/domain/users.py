"""User directory: owner lookup, registration, and credential check.

Accounts live behind a UserRepository. The directory reads through it on
every call, so several workers over one database agree on who exists.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Literal, Protocol

from ferienhaus.infra.hashing import hash_password, verify_password

from .errors import DuplicateUserError, InvalidCredentialsError, InvalidRegistrationError
from .segments import Owner, new_id

Role = Literal["user", "admin"]


@dataclass(frozen=True)
class User:
    id: str
    name: str
    email: str
    role: Role
    password_hash: str = ""

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def as_owner(self) -> Owner:
        return Owner(id=self.id, name=self.name)

    def to_public_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "email": self.email, "role": self.role}


class UserRepository(Protocol):
    def load_all(self) -> list[User]: ...

    def get(self, user_id: str) -> User | None: ...

    def find_by_email(self, email: str) -> User | None: ...

    def save(self, user: User) -> None:
        """Insert or replace by id.

        Raises:
            DuplicateUserError: Another account already uses the e-mail.
        """
        ...


class InMemoryUserRepository:
    """Non-durable accounts keyed by id."""

    def __init__(self, users: Iterable[User] = ()) -> None:
        self._users: dict[str, User] = {}
        for user in users:
            self.save(user)

    def load_all(self) -> list[User]:
        return list(self._users.values())

    def get(self, user_id: str) -> User | None:
        return self._users.get(user_id)

    def find_by_email(self, email: str) -> User | None:
        needle = email.lower()
        for user in self._users.values():
            if user.email.lower() == needle:
                return user
        return None

    def save(self, user: User) -> None:
        other = self.find_by_email(user.email)
        if other is not None and other.id != user.id:
            raise DuplicateUserError(f"E-mail {user.email} is already registered")
        self._users[user.id] = user


class UserDirectory:
    """Account lookups for the API and the booking service."""

    def __init__(
        self,
        users: Iterable[User] = (),
        *,
        repository: UserRepository | None = None,
    ) -> None:
        self.repository = repository if repository is not None else InMemoryUserRepository()
        for user in users:
            self.add(user)

    def add(self, user: User) -> None:
        self.repository.save(user)

    def get(self, user_id: str | None) -> User | None:
        if not user_id:
            return None
        return self.repository.get(user_id)

    def all(self) -> list[User]:
        return sorted(self.repository.load_all(), key=lambda u: u.name.lower())

    def search(self, term: str | None = None) -> list[User]:
        """Case-insensitive substring match on name or e-mail."""
        users = self.all()
        if not term:
            return users
        needle = term.lower()
        return [u for u in users if needle in u.name.lower() or needle in u.email.lower()]

    def register(self, name: str, email: str, password: str, *, role: Role = "user") -> User:
        """Create an account with a fresh id and a bcrypt password hash.

        Raises:
            InvalidRegistrationError: Blank name, malformed e-mail, or empty password.
            DuplicateUserError: The e-mail is already registered.
        """
        name = (name or "").strip()
        email = (email or "").strip().lower()
        if not name:
            raise InvalidRegistrationError("Name is required")
        if "@" not in email:
            raise InvalidRegistrationError("A valid e-mail address is required")
        if not password:
            raise InvalidRegistrationError("Password is required")
        if self.repository.find_by_email(email) is not None:
            raise DuplicateUserError(f"E-mail {email} is already registered")

        user = User(new_id(), name, email, role, hash_password(password))
        self.repository.save(user)
        return user

    def authenticate(self, email: str, password: str) -> User:
        """Resolve a user by e-mail and password.

        Raises:
            InvalidCredentialsError: Unknown e-mail or wrong password.
        """
        user = self.repository.find_by_email((email or "").strip())
        if user is not None and user.password_hash and verify_password(password or "", user.password_hash):
            return user
        raise InvalidCredentialsError("Invalid credentials")

"""User persistence."""
import uuid
from abc import ABC, abstractmethod
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from ..core.exceptions import DuplicateEmailError, NotFoundError, ValidationError
from ..core.validation import FIELD_MESSAGES
from ..database import Database
from ..models.base import utcnow
from ..models.user import User
from ..schemas.auth import NewUserRecord, StoredUser

# CHECK constraint name -> (field path, message)
CONSTRAINT_FIELDS = {
    "ck_users_role": ("role", FIELD_MESSAGES["role"][1]),
    "ck_users_home_lat_range": ("home_location.lat", FIELD_MESSAGES["home_location.lat"][1]),
    "ck_users_home_lng_range": ("home_location.lng", FIELD_MESSAGES["home_location.lng"][1]),
    "ck_users_home_location_complete": ("home_location", FIELD_MESSAGES["home_location"][1]),
}


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserStore(ABC):
    """Durable user collection keyed by a case-insensitive unique email.

    The store never hashes: ``create`` and ``update_password`` expect an
    already-hashed password.
    """

    @abstractmethod
    async def create(self, record: NewUserRecord) -> StoredUser:
        """Persist a new user.

        Raises:
            DuplicateEmailError: another user already has this email.
            ValidationError: the record breaks a storage constraint.
        """

    @abstractmethod
    async def find_by_email(
        self, email: str, include_secret: bool = False
    ) -> Optional[StoredUser]:
        """Look up a user; the hash is only filled in with ``include_secret``."""

    @abstractmethod
    async def get_by_id(self, user_id: uuid.UUID) -> Optional[StoredUser]:
        """Look up a user by id, without the hash."""

    @abstractmethod
    async def update_password(self, user_id: uuid.UUID, hashed_password: str) -> StoredUser:
        """Replace the stored hash.

        Raises:
            NotFoundError: no user has this id.
        """

    @abstractmethod
    async def count(self) -> int:
        """Number of stored users."""

    async def exists_by_email(self, email: str) -> bool:
        return await self.find_by_email(email) is not None


class SQLAlchemyUserStore(UserStore):
    """UserStore backed by the ``users`` table."""

    def __init__(self, database: Database):
        self.database = database

    @staticmethod
    def _to_stored(user: User, include_secret: bool) -> StoredUser:
        stored = StoredUser.model_validate(user)
        if not include_secret:
            stored.hashed_password = None
        return stored

    @staticmethod
    def _integrity_error(e: IntegrityError) -> Exception:
        detail = str(e.orig)
        for constraint, (field, message) in CONSTRAINT_FIELDS.items():
            if constraint in detail:
                return ValidationError({field: message})
        if "email" in detail:
            return DuplicateEmailError()
        return ValidationError({"record": "User record violates a storage constraint"})

    async def create(self, record: NewUserRecord) -> StoredUser:
        location = record.home_location
        user = User(
            email=normalize_email(record.email),
            hashed_password=record.hashed_password,
            name=record.name,
            role=record.role.value,
            home_lat=location.lat if location else None,
            home_lng=location.lng if location else None,
            home_address=location.address if location else None,
        )

        try:
            async with self.database.session() as session:
                session.add(user)
        except IntegrityError as e:
            raise self._integrity_error(e) from None

        return self._to_stored(user, include_secret=True)

    async def find_by_email(
        self, email: str, include_secret: bool = False
    ) -> Optional[StoredUser]:
        stmt = select(User).where(User.email == normalize_email(email))
        async with self.database.session() as session:
            result = await session.execute(stmt)
            user = result.scalar_one_or_none()

        if user is None:
            return None
        return self._to_stored(user, include_secret)

    async def get_by_id(self, user_id: uuid.UUID) -> Optional[StoredUser]:
        async with self.database.session() as session:
            user = await session.get(User, user_id)

        if user is None:
            return None
        return self._to_stored(user, include_secret=False)

    async def update_password(self, user_id: uuid.UUID, hashed_password: str) -> StoredUser:
        async with self.database.session() as session:
            user = await session.get(User, user_id)
            if user is None:
                raise NotFoundError("User not found")
            user.hashed_password = hashed_password
            user.updated_at = utcnow()

        return self._to_stored(user, include_secret=False)

    async def count(self) -> int:
        async with self.database.session() as session:
            result = await session.execute(select(func.count()).select_from(User))
            return result.scalar_one()

"""
User repository for database operations.
"""

from uuid import UUID

from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from circle.auth.models import User


class UserRepository:
    """Repository for user database operations."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, user_id: UUID) -> User | None:
        """Get a user by ID."""
        return await self._session.get(User, user_id)

    async def exists(self, user_id: UUID) -> bool:
        """Check whether a user with this ID exists."""
        stmt = select(exists().where(User.id == user_id))
        result = await self._session.execute(stmt)
        return bool(result.scalar())

    async def create(self, user: User) -> User:
        """Create a user.

        Args:
            user: User to create.

        Returns:
            Created user with ID.
        """
        self._session.add(user)
        await self._session.flush()
        return user

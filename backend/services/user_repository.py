"""Data access for the users table."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from db.tables import User


class UserRepository:
    def __init__(self, session: AsyncSession):
        self._session = session

    async def list_page(self, page: int, page_size: int) -> tuple[list[User], int]:
        """Return one page of users ordered by id, plus the total row count."""
        total = await self._session.scalar(select(func.count()).select_from(User))
        result = await self._session.execute(
            select(User).order_by(User.id).offset((page - 1) * page_size).limit(page_size)
        )
        return list(result.scalars().all()), total or 0

    async def get_by_id(self, user_id: int) -> User | None:
        return await self._session.get(User, user_id)

    async def get_by_email(self, email: str) -> User | None:
        result = await self._session.execute(select(User).where(func.lower(User.email) == email.lower()))
        return result.scalar_one_or_none()

    async def create(self, user: User) -> User:
        self._session.add(user)
        await self._session.flush()
        await self._session.refresh(user)
        return user

    async def update(self, user: User) -> User:
        await self._session.flush()
        await self._session.refresh(user)
        return user

    async def delete(self, user: User) -> None:
        await self._session.delete(user)
        await self._session.flush()

"""User business logic: hashing, uniqueness checks and HATEOAS links."""

import base64
import logging
import math

import bcrypt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from db.tables import User
from models.requests import UserCreate, UserUpdate
from models.responses import Link, PagedResponse, UserResponse
from services.user_repository import UserRepository

logger = logging.getLogger(__name__)


class EmailAlreadyRegisteredError(Exception):
    """Another user already owns this email."""


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def issue_token(user: User) -> str:
    """Opaque session token: base64 of "id:email". Not a signed credential."""
    return base64.b64encode(f"{user.id}:{user.email}".encode("utf-8")).decode("ascii")


def user_links(user_id: int, base_url: str) -> list[Link]:
    return [
        Link(href=f"{base_url}/{user_id}", rel="self", method="GET"),
        Link(href=f"{base_url}/{user_id}", rel="update", method="PUT"),
        Link(href=f"{base_url}/{user_id}", rel="delete", method="DELETE"),
        Link(href=base_url, rel="all-users", method="GET"),
    ]


def pagination_links(page: int, page_size: int, total_pages: int, base_url: str) -> list[Link]:
    def _href(p: int) -> str:
        return f"{base_url}?page={p}&page_size={page_size}"

    links = [Link(href=_href(page), rel="self", method="GET")]
    if page > 1:
        links.append(Link(href=_href(page - 1), rel="previous", method="GET"))
        links.append(Link(href=_href(1), rel="first", method="GET"))
    if page < total_pages:
        links.append(Link(href=_href(page + 1), rel="next", method="GET"))
        links.append(Link(href=_href(total_pages), rel="last", method="GET"))
    return links


def to_response(user: User, base_url: str) -> UserResponse:
    return UserResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        phone=user.phone,
        created_at=user.created_at,
        updated_at=user.updated_at,
        links=user_links(user.id, base_url),
    )


class UserService:
    def __init__(self, session: AsyncSession):
        self._session = session
        self._repo = UserRepository(session)

    async def list_users(self, page: int, page_size: int, base_url: str) -> PagedResponse:
        logger.info("Listing users: page=%d page_size=%d", page, page_size)
        users, total = await self._repo.list_page(page, page_size)
        total_pages = math.ceil(total / page_size)
        return PagedResponse(
            page=page,
            page_size=page_size,
            total_items=total,
            total_pages=total_pages,
            data=[to_response(u, base_url) for u in users],
            links=pagination_links(page, page_size, total_pages, base_url),
        )

    async def get_user(self, user_id: int, base_url: str) -> UserResponse | None:
        user = await self._repo.get_by_id(user_id)
        if user is None:
            logger.warning("User %d not found", user_id)
            return None
        return to_response(user, base_url)

    async def create_user(self, data: UserCreate, base_url: str) -> UserResponse:
        user = await self.register(data)
        return to_response(user, base_url)

    async def register(self, data: UserCreate) -> User:
        """Create and return the ORM user. Raises EmailAlreadyRegisteredError."""
        logger.info("Creating user %s", data.email)
        if await self._repo.get_by_email(data.email) is not None:
            logger.warning("Email already registered: %s", data.email)
            raise EmailAlreadyRegisteredError("Email already registered")

        user = User(
            name=data.name,
            email=data.email,
            password=hash_password(data.password),
            phone=data.phone,
        )
        try:
            return await self._repo.create(user)
        except IntegrityError as e:
            await self._session.rollback()
            logger.warning("Email already registered (unique constraint): %s", data.email)
            raise EmailAlreadyRegisteredError("Email already registered") from e

    async def update_user(self, user_id: int, data: UserUpdate, base_url: str) -> UserResponse | None:
        """Apply only the provided fields. Returns None when the user does not exist."""
        user = await self._repo.get_by_id(user_id)
        if user is None:
            logger.warning("User %d not found for update", user_id)
            return None

        if data.email and data.email.lower() != user.email.lower():
            if await self._repo.get_by_email(data.email) is not None:
                logger.warning("Email already registered: %s", data.email)
                raise EmailAlreadyRegisteredError("Email already registered")

        if data.name:
            user.name = data.name
        if data.email:
            user.email = data.email
        if data.password:
            user.password = hash_password(data.password)
        if data.phone is not None:
            user.phone = data.phone

        try:
            user = await self._repo.update(user)
        except IntegrityError as e:
            await self._session.rollback()
            logger.warning("Email already registered (unique constraint): %s", data.email)
            raise EmailAlreadyRegisteredError("Email already registered") from e
        return to_response(user, base_url)

    async def delete_user(self, user_id: int) -> bool:
        user = await self._repo.get_by_id(user_id)
        if user is None:
            return False
        await self._repo.delete(user)
        logger.info("Deleted user %d", user_id)
        return True

    async def authenticate(self, email: str, password: str) -> User | None:
        """Return the user when the password matches its bcrypt hash."""
        user = await self._repo.get_by_email(email)
        if user is None:
            logger.warning("Login attempt for unknown email: %s", email)
            return None
        if not verify_password(password, user.password):
            logger.warning("Invalid password for %s", email)
            return None
        return user

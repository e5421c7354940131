"""
Account Service

Registration and login for customers and restaurant owners. Credentials are
compared as stored; there is no hashing or token issuance.
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from foodorder.exceptions import DuplicateEmail, InvalidCredentials, UserNotFound
from foodorder.models import User, UserRole

logger = logging.getLogger(__name__)


class AccountService:
    """Account operations bound to one database session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def register(
        self,
        name: str,
        email: str,
        password: str,
        phone: Optional[str] = None,
        address: Optional[str] = None,
        role: UserRole = UserRole.CUSTOMER,
        restaurant_name: Optional[str] = None,
    ) -> User:
        """
        Create a new account.

        Raises:
            DuplicateEmail: an account with this email already exists
        """
        role = UserRole(role)

        existing = await self.db.execute(select(User.id).where(User.email == email))
        if existing.scalar_one_or_none() is not None:
            logger.info(f"Registration refused, email already in use: {email}")
            raise DuplicateEmail()

        user = User(
            name=name,
            email=email,
            password=password,
            phone=phone,
            address=address,
            role=role,
            restaurant_name=restaurant_name if role == UserRole.OWNER else None,
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            # lost a race with a concurrent registration for the same email
            await self.db.rollback()
            raise DuplicateEmail()
        await self.db.refresh(user)

        logger.info(f"Registered {role.value} {user.id} ({email})")
        return user

    async def login(self, email: str, password: str, role: str) -> User:
        """
        Match the exact (email, password, role) triple.

        Raises:
            InvalidCredentials: no account matches all three fields
        """
        try:
            role = UserRole(role)
        except ValueError:
            logger.info(f"Failed login for {email}: unknown role {role!r}")
            raise InvalidCredentials()

        result = await self.db.execute(
            select(User).where(
                User.email == email,
                User.password == password,
                User.role == role,
            )
        )
        user = result.scalar_one_or_none()
        if user is None:
            logger.info(f"Failed login for {email} as {role}")
            raise InvalidCredentials()
        return user

    async def get_user(self, user_id: str) -> User:
        result = await self.db.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()
        if user is None:
            raise UserNotFound()
        return user

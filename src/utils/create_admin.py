import logging

from passlib.context import CryptContext
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError

from src.config import (
    SUPER_ADMIN_EMAIL,
    SUPER_ADMIN_FIRST_NAME,
    SUPER_ADMIN_ID,
    SUPER_ADMIN_LAST_NAME,
    SUPER_ADMIN_PASSWORD,
)
from src.database import async_session_maker
from src.users.models import User, UserRole

logger = logging.getLogger(__name__)


async def create_super_admin(session_maker=async_session_maker):
    pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

    async with session_maker() as session:
        result = await session.execute(
            select(User).where(or_(User.id == SUPER_ADMIN_ID, User.email == SUPER_ADMIN_EMAIL))
        )
        if result.scalars().first():
            logger.info("Super admin already exists, skipping")
            return

        try:
            session.add(User(
                id=SUPER_ADMIN_ID,
                email=SUPER_ADMIN_EMAIL,
                first_name=SUPER_ADMIN_FIRST_NAME,
                last_name=SUPER_ADMIN_LAST_NAME,
                role=UserRole.ADMIN,
                hashed_password=pwd_context.hash(SUPER_ADMIN_PASSWORD),
            ))
            await session.commit()
            logger.info("Super admin %s created", SUPER_ADMIN_ID)
        except IntegrityError:
            await session.rollback()
            logger.warning("Super admin already exists (integrity check)")

import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import Column, String, DateTime, Boolean, Enum as SqlEnum, Numeric
from src.database import Base


class UserRole(str, Enum):
    ADMIN = "admin"
    EMPLOYEE = "employee"


def generate_user_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True, default=generate_user_id)
    email = Column(String, unique=True, nullable=False, index=True)
    hashed_password = Column(String, nullable=True)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    role = Column(SqlEnum(UserRole, values_callable=lambda e: [m.value for m in e]), nullable=False, default=UserRole.EMPLOYEE)
    employee_id = Column(String, nullable=True)
    position = Column(String, nullable=True)
    department = Column(String, nullable=True, index=True)
    hourly_rate = Column(Numeric(10, 2), nullable=True, default=0)
    phone_number = Column(String, nullable=True)
    avatar_url = Column(String, nullable=True)

    street = Column(String, nullable=True)
    city = Column(String, nullable=True)
    state = Column(String, nullable=True)
    country = Column(String, nullable=True)
    zip_code = Column(String, nullable=True)

    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)

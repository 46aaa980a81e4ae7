"""ORM model for application users (auth and role checks)."""

from sqlalchemy import Column, DateTime, Integer, String, func

from campus_connect.models.base import Base

ROLE_USER = "User"
ROLE_ADMIN = "Admin"
ROLES = (ROLE_USER, ROLE_ADMIN)


class User(Base):
    """
    User account for JWT authentication and role-based access control.

    role: 'User' or 'Admin'. Only the create_user script can grant 'Admin'.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default=ROLE_USER)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

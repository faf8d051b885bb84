from database.init import Base

from sqlalchemy import Column, Integer, String, Boolean, Enum as SQLAlchemyEnum
from sqlalchemy.orm import relationship

from enums.user_role import UserRole


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(100), unique=True, index=True, nullable=False)
    role = Column(SQLAlchemyEnum(UserRole), nullable=False, default=UserRole.TENANT)
    is_active = Column(Boolean, default=True)

    tenant = relationship("Tenant", back_populates="user", uselist=False)

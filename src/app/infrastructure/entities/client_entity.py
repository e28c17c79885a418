from decimal import Decimal
from enum import Enum as PyEnum

from sqlalchemy import String, Numeric, Enum, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.shared.database.database import Base


class ClientSex(str, PyEnum):
    """Client sex enum stored in the clients table."""
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"


class ClientEntity(Base):
    """SQLAlchemy model for Client table."""
    __tablename__ = "clients"

    id: Mapped[int] = mapped_column(primary_key=True)
    email: Mapped[str] = mapped_column(String(255), index=True)
    first_name: Mapped[str] = mapped_column(String(60), index=True)
    last_name: Mapped[str] = mapped_column(String(60), index=True)
    personal_id: Mapped[str] = mapped_column(String(11), unique=True, index=True)
    profile_photo: Mapped[str | None] = mapped_column(String(2048), nullable=True)
    mobile_number: Mapped[str] = mapped_column(String(16))
    sex: Mapped[ClientSex] = mapped_column(
        Enum(ClientSex, values_callable=lambda x: [e.value for e in x]),
        nullable=False
    )

    # Owned entities are always loaded with the client and removed with it
    address: Mapped["AddressEntity"] = relationship(
        "AddressEntity",
        back_populates="client",
        uselist=False,
        lazy="selectin",
        cascade="all, delete-orphan"
    )
    accounts: Mapped[list["AccountEntity"]] = relationship(
        "AccountEntity",
        back_populates="client",
        lazy="selectin",
        order_by="AccountEntity.id",
        cascade="all, delete-orphan"
    )


class AddressEntity(Base):
    """SQLAlchemy model for Address table."""
    __tablename__ = "addresses"

    id: Mapped[int] = mapped_column(primary_key=True)
    client_id: Mapped[int] = mapped_column(
        ForeignKey("clients.id", ondelete="CASCADE"),
        unique=True,
        nullable=False
    )
    country: Mapped[str] = mapped_column(String(100))
    city: Mapped[str] = mapped_column(String(100), index=True)
    street: Mapped[str] = mapped_column(String(255))
    zip_code: Mapped[str] = mapped_column(String(20))

    client: Mapped[ClientEntity] = relationship("ClientEntity", back_populates="address")


class AccountEntity(Base):
    """SQLAlchemy model for Account table."""
    __tablename__ = "accounts"

    id: Mapped[int] = mapped_column(primary_key=True)
    client_id: Mapped[int] = mapped_column(
        ForeignKey("clients.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    account_number: Mapped[str] = mapped_column(String(64), index=True)
    account_type: Mapped[str] = mapped_column(String(64))
    balance: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False, default=Decimal("0"))

    client: Mapped[ClientEntity] = relationship("ClientEntity", back_populates="accounts")

"""SQLAlchemy models for catorcena database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class Movement(Base):
    """General income/expense movement model."""

    __tablename__ = "movements"

    id = Column(Integer, primary_key=True)
    kind = Column(String, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    description = Column(String, nullable=False, default="")
    category = Column(String, nullable=True)
    recurrence = Column(String, nullable=False, default="one-off")
    frequency = Column(String, nullable=True)
    date = Column(Date, nullable=True)
    start_date = Column(Date, nullable=True)
    day_of_month = Column(Integer, nullable=True)
    day_of_week = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class Card(Base):
    """Credit card model."""

    __tablename__ = "cards"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    cut_off_day = Column(Integer, nullable=False)
    grace_period_days = Column(Integer, nullable=False, default=0)
    credit_limit = Column(Numeric(12, 2), nullable=False, default=0)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    charges = relationship(
        "Charge",
        back_populates="card",
        cascade="all, delete-orphan",
        order_by="Charge.position",
    )


class Charge(Base):
    """Card charge model."""

    __tablename__ = "charges"

    id = Column(Integer, primary_key=True)
    card_id = Column(Integer, ForeignKey("cards.id"), nullable=False)
    position = Column(Integer, nullable=False, default=0)
    description = Column(String, nullable=False, default="")
    amount = Column(Numeric(12, 2), nullable=False)
    purchase_date = Column(Date, nullable=False)
    category = Column(String, nullable=True)
    recurrence = Column(String, nullable=False, default="one-off")
    frequency = Column(String, nullable=True)
    day_of_month = Column(Integer, nullable=True)
    day_of_week = Column(String, nullable=True)
    installment_months = Column(Integer, nullable=True)

    # Relationships
    card = relationship("Card", back_populates="charges")


class DebitAccount(Base):
    """Debit account model with its yield settings."""

    __tablename__ = "debit_accounts"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    yield_enabled = Column(Boolean, default=False, nullable=False)
    annual_rate_percent = Column(Numeric(8, 4), nullable=False, default=0)
    capped = Column(Boolean, default=False, nullable=False)
    cap_amount = Column(Numeric(12, 2), nullable=True)
    accrual_frequency = Column(String, nullable=False, default="monthly")
    last_accrual_date = Column(Date, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    movements = relationship(
        "DebitMovement",
        back_populates="account",
        cascade="all, delete-orphan",
        order_by="DebitMovement.id",
    )


class DebitMovement(Base):
    """Debit account movement model."""

    __tablename__ = "debit_movements"

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, ForeignKey("debit_accounts.id"), nullable=False)
    kind = Column(String, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    description = Column(String, nullable=False, default="")
    recurrence = Column(String, nullable=False, default="one-off")
    frequency = Column(String, nullable=True)
    date = Column(Date, nullable=True)
    start_date = Column(Date, nullable=True)
    day_of_month = Column(Integer, nullable=True)
    day_of_week = Column(String, nullable=True)
    is_yield = Column(Boolean, default=False, nullable=False)

    # Relationships
    account = relationship("DebitAccount", back_populates="movements")


class PaidMark(Base):
    """Paid overlay: a row means the item is covered in that period."""

    __tablename__ = "paid_marks"

    id = Column(Integer, primary_key=True)
    year = Column(Integer, nullable=False)
    period_index = Column(Integer, nullable=False)
    item_id = Column(String, nullable=False)

    __table_args__ = (UniqueConstraint("year", "period_index", "item_id", name="uq_period_item"),)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)

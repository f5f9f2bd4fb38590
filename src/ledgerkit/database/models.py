"""SQLAlchemy models for the ledger database."""

from datetime import datetime, UTC
from decimal import Decimal, ROUND_HALF_UP
from sqlalchemy import (
    BigInteger,
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Boolean,
    CheckConstraint,
    Index,
    TypeDecorator,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()

CENT = Decimal("0.01")


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Money(TypeDecorator):
    """Decimal amount stored as a whole number of cents.

    SQLite keeps NUMERIC columns as floating point, so arithmetic done in
    SQL (``balance = balance + :delta``) would drift. Integer cents keep
    every backend exact. A BIGINT holds balances up to about 9.2e16 in
    currency units.
    """

    impl = BigInteger
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return int((Decimal(value) / CENT).to_integral_value(rounding=ROUND_HALF_UP))

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return (Decimal(value) * CENT).quantize(CENT)

    def coerce_compared_value(self, op, value):
        return self


class Account(Base):
    """Chart-of-accounts model."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    code = Column(String(20), unique=True, nullable=False)
    name = Column(String(200), nullable=False)
    type = Column(String, nullable=False)
    parent_id = Column(Integer, ForeignKey("accounts.id"), nullable=True)
    balance = Column(Money, default=Decimal("0"), nullable=False)
    status = Column(String, default="active", nullable=False)
    is_imported = Column(Boolean, default=False, nullable=False)
    description = Column(String(1000), nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)

    # Relationships
    parent = relationship("Account", remote_side=[id], backref="children")


class Transaction(Base):
    """Two-leg journal entry model."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    date = Column(Date, nullable=False)
    type = Column(String, nullable=False)
    description = Column(String(500), nullable=False, default="")
    debit_account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    credit_account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    amount = Column(Money, nullable=False)
    status = Column(String, default="pending", nullable=False)
    reference = Column(String(100), nullable=True)
    notes = Column(String(1000), nullable=True)
    created_by = Column(String, nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_transaction_amount_positive"),
        CheckConstraint(
            "debit_account_id <> credit_account_id", name="ck_transaction_distinct_legs"
        ),
        Index("ix_transactions_debit_account_id", "debit_account_id"),
        Index("ix_transactions_credit_account_id", "credit_account_id"),
    )

    # Relationships
    debit_account = relationship("Account", foreign_keys=[debit_account_id])
    credit_account = relationship("Account", foreign_keys=[credit_account_id])


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)

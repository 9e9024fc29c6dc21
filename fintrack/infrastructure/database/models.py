"""SQLAlchemy ORM models"""

import uuid
from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, Numeric, String, Text, Uuid
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class CreditCard(Base):
    """Credit card with its billing cycle"""

    __tablename__ = "credit_cards"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    brand = Column(String(255), nullable=False)
    last_four_digits = Column(String(4), nullable=False)
    credit_limit = Column(Numeric(12, 2), nullable=False)
    closing_day = Column(Integer, nullable=False)
    due_day = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    expenses = relationship("CreditCardExpense", back_populates="credit_card", cascade="all, delete-orphan")


class CreditCardExpense(Base):
    """One installment of a card purchase"""

    __tablename__ = "credit_card_expenses"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    credit_card_id = Column(Uuid(as_uuid=True), ForeignKey("credit_cards.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Text, nullable=False, index=True)
    group_id = Column(String(36), nullable=False, index=True)
    description = Column(String(255), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    purchase_date = Column(Date, nullable=False)
    installments = Column(Integer, nullable=False, default=1)
    current_installment = Column(Integer, nullable=False, default=1)
    invoice_month = Column(String(7), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    credit_card = relationship("CreditCard", back_populates="expenses")


class RecurringExpense(Base):
    """Recurring charge schedule"""

    __tablename__ = "recurring_expenses"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    description = Column(String(255), nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    frequency = Column(Text, nullable=False)
    custom_interval_days = Column(Integer, nullable=True)
    total_installments = Column(Integer, nullable=False, default=0)
    current_installment = Column(Integer, nullable=False, default=0)
    type = Column(Text, nullable=False)
    category_id = Column(Text, nullable=True)
    last_generated_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    transactions = relationship("Transaction", back_populates="recurring_expense")


class Transaction(Base):
    """Expense transaction materialized from a recurring plan"""

    __tablename__ = "transactions"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    recurring_expense_id = Column(
        Uuid(as_uuid=True), ForeignKey("recurring_expenses.id", ondelete="SET NULL"), nullable=True
    )
    description = Column(String(255), nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    type = Column(Text, nullable=False, default="EXPENSE")
    date = Column(Date, nullable=False, index=True)
    payment_method = Column(Text, nullable=True)
    is_recurring = Column(Boolean, nullable=False, default=False)
    category_id = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    recurring_expense = relationship("RecurringExpense", back_populates="transactions")

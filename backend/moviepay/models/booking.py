"""
Booking model: the durable record of a ticket purchase.

Key design decisions:
- Rows are never updated or deleted; there is no status column
- checkout_session_id ties a booking to the payment session that paid for it
  and is unique when present, so replays collapse onto one row
- Rows without a checkout session are not deduplicated
"""

from uuid import uuid4

from sqlalchemy import CheckConstraint, Column, Index, Numeric, String

from moviepay.db.base import Base, TimestampMixin


def new_booking_id() -> str:
    return uuid4().hex


class Booking(Base, TimestampMixin):
    __tablename__ = "bookings"

    id = Column(String(32), primary_key=True, default=new_booking_id)
    user_id = Column(String(255), nullable=False, index=True)
    movie_title = Column(String(255), nullable=False)
    amount = Column(Numeric(12, 2, asdecimal=False), nullable=False)
    currency = Column(String(3), nullable=False, default="inr")
    checkout_session_id = Column(String(255), nullable=True, unique=True)

    __table_args__ = (
        CheckConstraint("amount > 0", name="check_booking_amount_positive"),
        Index("ix_bookings_user_created", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, user={self.user_id}, movie={self.movie_title}, amount={self.amount})>"

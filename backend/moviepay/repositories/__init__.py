from moviepay.repositories.booking_repository import BookingStore, SqlAlchemyBookingStore

__all__ = ["BookingStore", "SqlAlchemyBookingStore"]

from moviepay.models.booking import Booking

__all__ = ["Booking"]

"""
Booking endpoints.
"""

from fastapi import APIRouter, Depends, Query, Response, status

from moviepay.api.deps import get_booking_service
from moviepay.schemas.booking import BookingCreate, BookingResponse, BookingStoredResponse
from moviepay.services.booking_service import BookingService

router = APIRouter(prefix="/api/bookings", tags=["Bookings"])


@router.post("", response_model=BookingStoredResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking_data: BookingCreate,
    response: Response,
    bookings: BookingService = Depends(get_booking_service),
):
    """
    Store a booking.

    Without `checkoutSessionId` every call writes a new booking. With it,
    a repeated call returns the stored booking with 200 instead of 201.
    """
    result = await bookings.record_booking(
        user_id=booking_data.user_id,
        movie_title=booking_data.movie_title,
        amount=booking_data.amount,
        checkout_session_id=booking_data.checkout_session_id,
    )
    booking = BookingResponse.model_validate(result.booking)
    if not result.created:
        response.status_code = status.HTTP_200_OK
        return BookingStoredResponse(message="Booking already stored", booking=booking)
    return BookingStoredResponse(message="Booking stored", booking=booking)


@router.get("", response_model=list[BookingResponse])
async def list_bookings(
    user_id: str = Query(..., alias="userId"),
    bookings: BookingService = Depends(get_booking_service),
):
    """List a user's bookings, newest first."""
    return await bookings.list_bookings(user_id)


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: str,
    bookings: BookingService = Depends(get_booking_service),
):
    return await bookings.get_booking(booking_id)

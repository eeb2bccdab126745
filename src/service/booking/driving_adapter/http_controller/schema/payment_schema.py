from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from src.service.booking.app.dto.finalize_booking_dto import FinalizeBookingResult
from src.service.booking.domain.entity.booking_entity import BookingEntity
from src.service.booking.domain.entity.payment_entity import PaymentEntity


class InitializePaymentRequest(BaseModel):
    email: EmailStr
    amount_minor: int = Field(gt=0)
    trip_id: int = Field(gt=0)
    seat_ids: List[int] = Field(min_length=1)
    callback_url: Optional[str] = None

    model_config = ConfigDict(
        json_schema_extra={
            'example': {
                'email': 'ada@example.com',
                'amount_minor': 900000,
                'trip_id': 1,
                'seat_ids': [4, 5, 6],
            }
        }
    )


class InitializePaymentResponse(BaseModel):
    reference: str
    authorization_url: Optional[str]
    status: str

    @classmethod
    def from_entity(cls, payment: PaymentEntity) -> 'InitializePaymentResponse':
        return cls(
            reference=payment.reference,
            authorization_url=payment.authorization_url,
            status=payment.status.value,
        )


class VerifyPaymentRequest(BaseModel):
    reference: str = Field(min_length=1)


class BookingResponse(BaseModel):
    booking_code: str
    user_id: int
    seat_id: int
    trip_id: int
    position: int
    amount_minor: int
    payment_reference: str
    created_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, booking: BookingEntity) -> 'BookingResponse':
        return cls(
            booking_code=booking.booking_code,
            user_id=booking.user_id,
            seat_id=booking.seat_id,
            trip_id=booking.trip_id,
            position=booking.position,
            amount_minor=booking.amount_minor,
            payment_reference=booking.payment_reference,
            created_at=booking.created_at,
        )


class BookingFailureResponse(BaseModel):
    seat_id: Optional[int]
    code: str
    message: str


class FinalizeBookingResponse(BaseModel):
    payment_reference: str
    success: bool
    payment_status: str
    bookings: List[BookingResponse]
    failures: List[BookingFailureResponse]

    @classmethod
    def from_result(cls, result: FinalizeBookingResult) -> 'FinalizeBookingResponse':
        return cls(
            payment_reference=result.payment_reference,
            success=result.success,
            payment_status=result.payment_status.value,
            bookings=[BookingResponse.from_entity(b) for b in result.bookings],
            failures=[
                BookingFailureResponse(seat_id=f.seat_id, code=f.code.value, message=f.message)
                for f in result.failures
            ],
        )

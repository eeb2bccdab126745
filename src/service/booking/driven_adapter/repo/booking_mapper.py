from src.platform.types.utc_datetime import ensure_utc
from src.service.booking.domain.entity.booking_entity import BookingEntity
from src.service.booking.driven_adapter.model.booking_model import BookingModel


def booking_model_to_entity(booking_model: BookingModel) -> BookingEntity:
    return BookingEntity(
        id=booking_model.id,
        booking_code=booking_model.booking_code,
        user_id=booking_model.user_id,
        seat_id=booking_model.seat_id,
        trip_id=booking_model.trip_id,
        payment_reference=booking_model.payment_reference,
        amount_minor=booking_model.amount_minor,
        position=booking_model.position,
        created_at=ensure_utc(booking_model.created_at),
    )

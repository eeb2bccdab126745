from src.platform.types.utc_datetime import ensure_utc
from src.service.reservation.domain.entity.trip_entity import TripEntity
from src.service.reservation.domain.enum.trip_status import TripStatus
from src.service.reservation.driven_adapter.model.trip_model import TripModel


def trip_model_to_entity(trip_model: TripModel) -> TripEntity:
    return TripEntity(
        id=trip_model.id,
        trip_code=trip_model.trip_code,
        trip_name=trip_model.trip_name,
        bus=trip_model.bus,
        pickup_city=trip_model.pickup_city,
        pickup_location=trip_model.pickup_location,
        dropoff_city=trip_model.dropoff_city,
        dropoff_location=trip_model.dropoff_location,
        takeoff_date=trip_model.takeoff_date,
        takeoff_time=trip_model.takeoff_time,
        arrival_time=trip_model.arrival_time,
        price_minor=trip_model.price_minor,
        seat_count=trip_model.seat_count,
        status=TripStatus(trip_model.status),
        created_at=ensure_utc(trip_model.created_at),
        updated_at=ensure_utc(trip_model.updated_at),
    )

from datetime import date, datetime, timezone
import random
import re

import pytest

from src.platform.exception.exceptions import InvalidInputError
from src.service.reservation.domain.entity.trip_entity import (
    MAX_SEAT_COUNT,
    TripEntity,
    generate_trip_code,
    shuffled_positions,
)


pytestmark = pytest.mark.unit


def _create(**overrides):
    fields = {
        'trip_name': 'Morning Express',
        'bus': 'Toyota Coaster',
        'pickup_city': 'Lagos',
        'pickup_location': 'Jibowu',
        'dropoff_city': 'Ibadan',
        'dropoff_location': 'Challenge',
        'takeoff_date': date(2026, 12, 1),
        'takeoff_time': '08:30',
        'seat_count': 40,
    }
    fields.update(overrides)
    return TripEntity.create(**fields)


class TestTripEntity:
    def test_create_assigns_a_trip_code(self):
        trip = _create()
        assert trip.trip_code is not None
        assert re.fullmatch(r'TRIP-\d{14}-[A-Z0-9]{4}', trip.trip_code)

    def test_create_strips_text_fields(self):
        trip = _create(trip_name='  Night Bus  ')
        assert trip.trip_name == 'Night Bus'

    @pytest.mark.parametrize('seat_count', [0, -1, MAX_SEAT_COUNT + 1])
    def test_seat_count_out_of_range_is_rejected(self, seat_count):
        with pytest.raises(InvalidInputError):
            _create(seat_count=seat_count)

    def test_blank_name_is_rejected(self):
        with pytest.raises(InvalidInputError):
            _create(trip_name='   ')

    def test_negative_price_is_rejected(self):
        with pytest.raises(InvalidInputError):
            _create(price_minor=-1)


class TestTripCodeAndPositions:
    def test_trip_code_embeds_the_timestamp(self):
        code = generate_trip_code(datetime(2026, 3, 4, 5, 6, 7, tzinfo=timezone.utc))
        assert code.startswith('TRIP-20260304050607-')

    def test_shuffled_positions_is_a_permutation(self):
        positions = shuffled_positions(40, random.Random(1))
        assert sorted(positions) == list(range(1, 41))

    def test_shuffle_is_reproducible_with_a_seeded_rng(self):
        assert shuffled_positions(40, random.Random(5)) == shuffled_positions(40, random.Random(5))

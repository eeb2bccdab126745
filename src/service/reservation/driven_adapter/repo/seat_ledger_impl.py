from typing import Any, AsyncContextManager, Callable, List, Mapping, Optional, Sequence

from sqlalchemy import and_, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from src.platform.logging.loguru_io import Logger
from src.platform.types.utc_datetime import ensure_utc
from src.service.reservation.app.dto.seat_ledger_dto import CompareAndSetOutcome
from src.service.reservation.app.interface.i_seat_ledger import ISeatLedger
from src.service.reservation.domain.entity.seat_entity import SeatEntity
from src.service.reservation.domain.value_object.seat_ref import SeatIdRef, SeatRef, TripPositionRef
from src.service.reservation.domain.value_object.seat_transition import SeatTransition
from src.service.reservation.driven_adapter.model.seat_model import SeatModel


class SeatLedgerImpl(ISeatLedger):
    """
    Seat ledger on SQLAlchemy.

    compare_and_set is one `UPDATE seat SET ... WHERE id = :id AND (<expected>)`
    in its own short transaction. The database serializes writes per row, so the
    guard is evaluated against the latest committed state and at most one of
    several racing writers can match it. The post-write (or failing) record is
    re-read inside the same transaction before commit.
    """

    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]) -> None:
        self.session_factory = session_factory

    @Logger.io
    async def find_by_id(self, seat_id: int) -> Optional[SeatEntity]:
        async with self.session_factory() as session:
            seat_model = await session.get(SeatModel, seat_id)
            return self._model_to_entity(seat_model) if seat_model else None

    @Logger.io
    async def find_by_trip_and_position(self, *, trip_id: int, position: int) -> Optional[SeatEntity]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(SeatModel).where(SeatModel.trip_id == trip_id, SeatModel.position == position)
            )
            seat_model = result.scalar_one_or_none()
            return self._model_to_entity(seat_model) if seat_model else None

    async def resolve(self, seat_ref: SeatRef) -> Optional[SeatEntity]:
        if isinstance(seat_ref, SeatIdRef):
            return await self.find_by_id(seat_ref.seat_id)
        if isinstance(seat_ref, TripPositionRef):
            return await self.find_by_trip_and_position(
                trip_id=seat_ref.trip_id, position=seat_ref.position
            )
        raise TypeError(f'Unsupported seat reference: {seat_ref!r}')

    @Logger.io
    async def list_available(self, trip_id: int) -> List[SeatEntity]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(SeatModel)
                .where(SeatModel.trip_id == trip_id, SeatModel.is_booked.is_(False))
                .order_by(SeatModel.position)
            )
            return [self._model_to_entity(m) for m in result.scalars().all()]

    @Logger.io
    async def list_holding(self) -> List[SeatEntity]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(SeatModel)
                .where(
                    SeatModel.is_booking.is_(True),
                    SeatModel.is_booked.is_(False),
                    SeatModel.is_paid.is_(False),
                )
                .order_by(SeatModel.hold_started_at)
            )
            return [self._model_to_entity(m) for m in result.scalars().all()]

    @Logger.io
    async def find_many(self, seat_ids: Sequence[int]) -> List[SeatEntity]:
        if not seat_ids:
            return []
        async with self.session_factory() as session:
            result = await session.execute(select(SeatModel).where(SeatModel.id.in_(seat_ids)))
            return [self._model_to_entity(m) for m in result.scalars().all()]

    @Logger.io
    async def compare_and_set(
        self,
        *,
        seat_id: int,
        expected: Mapping[str, Any] | Sequence[Mapping[str, Any]],
        changes: Mapping[str, Any],
    ) -> CompareAndSetOutcome:
        alternatives = [expected] if isinstance(expected, Mapping) else list(expected)
        if not alternatives or not changes:
            raise ValueError('compare_and_set needs at least one expectation and one change')

        guard = or_(*(self._build_guard(alternative) for alternative in alternatives))
        stmt = (
            update(SeatModel)
            .where(SeatModel.id == seat_id, guard)
            .values(**changes)
            .execution_options(synchronize_session=False)
        )

        async with self.session_factory() as session:
            result = await session.execute(stmt)
            applied = result.rowcount == 1  # type: ignore[attr-defined]
            seat_model = await session.get(SeatModel, seat_id, populate_existing=True)
            await session.commit()

        seat = self._model_to_entity(seat_model) if seat_model else None
        return CompareAndSetOutcome(applied=applied, seat=seat)

    async def apply(self, *, seat_id: int, transition: SeatTransition) -> CompareAndSetOutcome:
        outcome = await self.compare_and_set(
            seat_id=seat_id, expected=transition.expected, changes=transition.changes
        )
        if not outcome.applied:
            Logger.base.info(
                f'[LEDGER] {transition.name} rejected for seat {seat_id} '
                f'(state={outcome.seat.state if outcome.seat else "missing"})'
            )
        return outcome

    @staticmethod
    def _build_guard(expected: Mapping[str, Any]) -> ColumnElement[bool]:
        columns = SeatModel.__table__.c
        return and_(
            *(
                columns[name].is_(None) if value is None else columns[name] == value
                for name, value in expected.items()
            )
        )

    @staticmethod
    def _model_to_entity(seat_model: SeatModel) -> SeatEntity:
        return SeatEntity(
            id=seat_model.id,
            trip_id=seat_model.trip_id,
            position=seat_model.position,
            is_booking=seat_model.is_booking,
            is_booked=seat_model.is_booked,
            is_paid=seat_model.is_paid,
            booked_by=seat_model.booked_by,
            paid_by=seat_model.paid_by,
            booking_code=seat_model.booking_code,
            hold_started_at=ensure_utc(seat_model.hold_started_at),
            hold_expires_at=ensure_utc(seat_model.hold_expires_at),
            reminders_sent=seat_model.reminders_sent,
            created_at=ensure_utc(seat_model.created_at),
            updated_at=ensure_utc(seat_model.updated_at),
        )

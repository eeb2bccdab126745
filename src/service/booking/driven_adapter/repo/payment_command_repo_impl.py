from typing import AsyncContextManager, Callable, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.platform.types.utc_datetime import ensure_utc
from src.service.booking.app.interface.i_payment_command_repo import IPaymentCommandRepo
from src.service.booking.domain.entity.payment_entity import PaymentEntity
from src.service.booking.domain.enum.payment_status import PaymentStatus
from src.service.booking.driven_adapter.model.booking_model import PaymentModel


class PaymentCommandRepoImpl(IPaymentCommandRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]) -> None:
        self.session_factory = session_factory

    @Logger.io
    async def get_by_reference(self, reference: str) -> Optional[PaymentEntity]:
        async with self.session_factory() as session:
            payment_model = await self._select(session, reference)
            return self._model_to_entity(payment_model) if payment_model else None

    @Logger.io
    async def get_or_create_pending(self, payment: PaymentEntity) -> PaymentEntity:
        async with self.session_factory() as session:
            existing = await self._select(session, payment.reference)
            if existing is not None:
                return self._model_to_entity(existing)

            payment_model = PaymentModel(
                reference=payment.reference,
                email=payment.email,
                amount_minor=payment.amount_minor,
                trip_id=payment.trip_id,
                seat_ids=list(payment.seat_ids),
                authorization_url=payment.authorization_url,
                status=PaymentStatus.PENDING.value,
            )
            session.add(payment_model)
            try:
                await session.commit()
            except IntegrityError:
                # Another callback for the same reference inserted first
                await session.rollback()
                winner = await self._select(session, payment.reference)
                if winner is None:
                    raise
                return self._model_to_entity(winner)
            await session.refresh(payment_model)
            return self._model_to_entity(payment_model)

    @Logger.io
    async def settle(
        self, *, reference: str, status: PaymentStatus, gateway_response: Optional[str] = None
    ) -> bool:
        async with self.session_factory() as session:
            result = await session.execute(
                update(PaymentModel)
                .where(
                    PaymentModel.reference == reference,
                    PaymentModel.status == PaymentStatus.PENDING.value,
                )
                .values(status=status.value, gateway_response=gateway_response)
                .execution_options(synchronize_session=False)
            )
            await session.commit()
            return result.rowcount == 1  # type: ignore[attr-defined]

    @staticmethod
    async def _select(session: AsyncSession, reference: str) -> Optional[PaymentModel]:
        result = await session.execute(select(PaymentModel).where(PaymentModel.reference == reference))
        return result.scalar_one_or_none()

    @staticmethod
    def _model_to_entity(payment_model: PaymentModel) -> PaymentEntity:
        return PaymentEntity(
            id=payment_model.id,
            reference=payment_model.reference,
            email=payment_model.email,
            amount_minor=payment_model.amount_minor,
            trip_id=payment_model.trip_id,
            seat_ids=list(payment_model.seat_ids or []),
            authorization_url=payment_model.authorization_url,
            status=PaymentStatus(payment_model.status),
            gateway_response=payment_model.gateway_response,
            created_at=ensure_utc(payment_model.created_at),
            updated_at=ensure_utc(payment_model.updated_at),
        )

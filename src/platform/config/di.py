"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.platform.database.orm_db_setting import Database
from src.service.booking.driven_adapter.gateway.paystack_gateway_impl import PaystackGatewayImpl
from src.service.booking.driven_adapter.repo.booking_command_repo_impl import (
    BookingCommandRepoImpl,
)
from src.service.booking.driven_adapter.repo.booking_query_repo_impl import BookingQueryRepoImpl
from src.service.booking.driven_adapter.repo.payment_command_repo_impl import (
    PaymentCommandRepoImpl,
)
from src.service.reservation.app.command.hold_expiry_check_use_case import HoldExpiryCheckUseCase
from src.service.reservation.driven_adapter.repo.seat_ledger_impl import SeatLedgerImpl
from src.service.reservation.driven_adapter.repo.trip_command_repo_impl import TripCommandRepoImpl
from src.service.reservation.driven_adapter.repo.trip_query_repo_impl import TripQueryRepoImpl
from src.service.reservation.driven_adapter.scheduler.hold_expiry_scheduler_impl import (
    HoldExpirySchedulerImpl,
)
from src.service.shared_kernel.driven_adapter.notification.log_notification_sender_impl import (
    LogNotificationSenderImpl,
)
from src.service.shared_kernel.driven_adapter.repo.user_query_repo_impl import UserQueryRepoImpl


class Container(containers.DeclarativeContainer):
    config_service = providers.Singleton(Settings)

    database = providers.Singleton(Database)

    # Repositories (stateless - open a short session per call)
    user_query_repo = providers.Singleton(
        UserQueryRepoImpl, session_factory=database.provided.session
    )
    seat_ledger = providers.Singleton(SeatLedgerImpl, session_factory=database.provided.session)
    trip_command_repo = providers.Singleton(
        TripCommandRepoImpl, session_factory=database.provided.session
    )
    trip_query_repo = providers.Singleton(
        TripQueryRepoImpl, session_factory=database.provided.session
    )
    booking_command_repo = providers.Singleton(
        BookingCommandRepoImpl, session_factory=database.provided.session
    )
    booking_query_repo = providers.Singleton(
        BookingQueryRepoImpl, session_factory=database.provided.session
    )
    payment_command_repo = providers.Singleton(
        PaymentCommandRepoImpl, session_factory=database.provided.session
    )

    # Outbound adapters
    notification_sender = providers.Singleton(LogNotificationSenderImpl)
    payment_gateway = providers.Singleton(
        PaystackGatewayImpl,
        base_url=config_service.provided.PAYSTACK_BASE_URL,
        secret_key=config_service.provided.PAYSTACK_SECRET_KEY,
        timeout_seconds=config_service.provided.PAYMENT_GATEWAY_TIMEOUT_SECONDS,
    )

    # Hold lifecycle (shared by the HTTP hold flow and the background sweeper)
    hold_expiry_check_use_case = providers.Singleton(
        HoldExpiryCheckUseCase,
        seat_ledger=seat_ledger,
        trip_query_repo=trip_query_repo,
        user_query_repo=user_query_repo,
        notification_sender=notification_sender,
        reminder_minutes=config_service.provided.HOLD_REMINDER_MINUTES,
        expiry_minutes=config_service.provided.HOLD_EXPIRY_MINUTES,
    )
    hold_expiry_scheduler = providers.Singleton(
        HoldExpirySchedulerImpl,
        seat_ledger=seat_ledger,
        check_use_case=hold_expiry_check_use_case,
        sweep_interval_seconds=config_service.provided.HOLD_SWEEP_INTERVAL_SECONDS,
    )


container = Container()

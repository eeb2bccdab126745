from collections import deque
from datetime import datetime, timezone

from src.platform.logging.loguru_io import Logger
from src.service.shared_kernel.app.interface.i_notification_sender import INotificationSender


SENT_HISTORY_SIZE = 200


class LogNotificationSenderImpl(INotificationSender):
    """Writes outgoing messages to the log instead of a mail/SMS transport.

    The most recent messages are kept in memory so tests can assert on them.
    """

    def __init__(self, *, history_size: int = SENT_HISTORY_SIZE) -> None:
        self.sent: deque[dict] = deque(maxlen=history_size)

    @Logger.io
    async def send(self, *, to: str, subject: str, body: str) -> None:
        self.sent.append(
            {'to': to, 'subject': subject, 'body': body, 'sent_at': datetime.now(timezone.utc)}
        )
        Logger.base.info(f'[NOTIFY] to={to} subject={subject!r}\n{body}')

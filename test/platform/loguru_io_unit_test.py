import pytest

from src.platform.logging.loguru_io import Logger
from src.platform.logging.loguru_io_config import call_depth_var
from src.platform.logging.loguru_io_utils import (
    MAX_CONTENT_LENGTH,
    mask_sensitive,
    normalize_args_kwargs,
    truncate_content,
)


pytestmark = pytest.mark.unit


class TestMasking:
    def test_secret_values_in_text_are_masked(self):
        masked = mask_sensitive("{'password': 'hunter2', 'email': 'a@b.co'}")
        assert 'hunter2' not in masked
        assert 'a@b.co' in masked

    def test_nothing_to_mask_returns_the_original_object(self):
        payload = {'seat_id': 3}
        assert mask_sensitive(payload) is payload

    def test_sensitive_kwargs_are_masked_by_the_decorator(self):
        decorator = Logger.io()
        assert decorator.mask_sensitive({'secret_key': 'sk_live', 'trip_id': 1}) == {
            'secret_key': '********',
            'trip_id': 1,
        }


class TestTruncation:
    def test_long_content_is_cut(self):
        text = 'x' * (MAX_CONTENT_LENGTH + 50)
        assert truncate_content(text).endswith('(+50 chars)')

    def test_short_content_is_untouched(self):
        assert truncate_content('short') == 'short'


class TestLoggerIo:
    def test_unknown_kwargs_are_dropped(self):
        def target(a, *, b):
            return a, b

        args, kwargs = normalize_args_kwargs(target, 1, b=2, c=3)
        assert args == (1,)
        assert kwargs == {'b': 2}

    @pytest.mark.asyncio
    async def test_async_call_depth_is_restored(self):
        @Logger.io
        async def inner(x: int) -> int:
            return x + 1

        @Logger.io
        async def outer(x: int) -> int:
            return await inner(x) * 2

        assert await outer(1) == 4
        assert call_depth_var.get() == 0

    def test_exceptions_are_reraised(self):
        @Logger.io
        def boom() -> None:
            raise ValueError('nope')

        with pytest.raises(ValueError):
            boom()

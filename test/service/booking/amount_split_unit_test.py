import pytest

from src.service.booking.domain.value_object.amount_split import split_amount


pytestmark = pytest.mark.unit


class TestSplitAmount:
    def test_even_split(self):
        assert split_amount(9000, 3) == [3000, 3000, 3000]

    def test_remainder_goes_to_the_first_shares(self):
        assert split_amount(1000, 3) == [334, 333, 333]

    @pytest.mark.parametrize('total, parts', [(1, 4), (999_999, 7), (0, 2), (10_000, 1)])
    def test_shares_always_sum_to_total(self, total, parts):
        shares = split_amount(total, parts)
        assert len(shares) == parts
        assert sum(shares) == total
        assert max(shares) - min(shares) <= 1

    def test_zero_parts_is_rejected(self):
        with pytest.raises(ValueError):
            split_amount(100, 0)

    def test_negative_total_is_rejected(self):
        with pytest.raises(ValueError):
            split_amount(-1, 2)

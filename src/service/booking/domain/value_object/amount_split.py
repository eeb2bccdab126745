from typing import List


def split_amount(total_minor: int, parts: int) -> List[int]:
    """Even split in minor units; the remainder goes one unit at a time to the first parts.

    The shares always sum to the total: split_amount(9000, 3) == [3000, 3000, 3000],
    split_amount(1000, 3) == [334, 333, 333].
    """
    if parts <= 0:
        raise ValueError('parts must be positive')
    if total_minor < 0:
        raise ValueError('total_minor cannot be negative')
    share, remainder = divmod(total_minor, parts)
    return [share + 1 if index < remainder else share for index in range(parts)]

"""parsing of rating period lengths"""
import re

DURATION_PATTERN = re.compile(r'^(\d+)([WDHMS])$', re.IGNORECASE)
UNIT_SECONDS = {
    'W': 604_800,
    'D': 86_400,
    'H': 3_600,
    'M': 60,
    'S': 1,
}


def get_duration(duration_str: str) -> int:
    """
    Convert a rating period string such as '1W', '7d' or '12H' into a number of seconds.

    Parameters:
        duration_str (str): an integer count followed by one of W, D, H, M, S (either case)

    Returns:
        int: length of the period in seconds
    """
    match = DURATION_PATTERN.match(duration_str.strip())
    if not match:
        raise ValueError(f'Invalid duration format: {duration_str}')
    count, unit = match.groups()
    seconds = int(count) * UNIT_SECONDS[unit.upper()]
    if seconds <= 0:
        raise ValueError(f'Duration must be positive: {duration_str}')
    return seconds

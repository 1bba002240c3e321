"""Stat arithmetic for display: race/class adjustment and 18/xx notation."""

# Stats never drop below this value when adjusted downwards
STAT_FLOOR = 3


def modify_stat_value(value: int, amount: int) -> int:
    """
    Apply a race/class adjustment to a stat.

    Below 18 each point is worth one step; from 18 up each point is worth
    ten (18, 18/10, 18/20...), and a reduction from the 18/xx range first
    falls back to plain 18.
    """
    if amount > 0:
        for _ in range(amount):
            value += 1 if value < 18 else 10
    elif amount < 0:
        for _ in range(-amount):
            if value >= 18 + 10:
                value -= 10
            elif value > 18:
                value = 18
            elif value > STAT_FLOOR:
                value -= 1
    return value


def format_stat(value: int) -> str:
    """Six character display form of a stat, e.g. '    16', ' 18/20', '18/100'."""
    if value > 18:
        bonus = value - 18
        if bonus >= 220:
            return "18/***"
        if bonus >= 100:
            return f"18/{bonus:03d}"
        return f" 18/{bonus:02d}"
    return f"    {value:2d}"

"""Level arithmetic: every 100 XP is one level."""

XP_PER_LEVEL = 100


def level(xp: int) -> int:
    return max(1, xp // XP_PER_LEVEL)


def xp_for_level(lvl: int) -> int:
    return lvl * XP_PER_LEVEL


def xp_progress(xp: int) -> int:
    """XP earned inside the current level.

    Level 1 covers everything below 200 XP, so anything under 100 reports 0.
    """
    return max(0, xp - xp_for_level(level(xp)))


def xp_for_next_level(xp: int) -> int:
    """XP still missing before the next level."""
    return xp_for_level(level(xp) + 1) - xp


def level_title(lvl: int) -> str:
    if lvl <= 5:
        return "Fact Explorer"
    elif lvl <= 10:
        return "Knowledge Hunter"
    elif lvl <= 15:
        return "Science Enthusiast"
    elif lvl <= 20:
        return "Fact Master"
    elif lvl <= 25:
        return "Knowledge Legend"
    return "Fact Legend"

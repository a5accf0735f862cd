"""
Selection policy
Quality floors and sampling knobs for picks and browsing
"""
import os


def _env_int(name: str, default: int) -> int:
    return int(os.getenv(f"MUSE_{name}", default))


def _env_float(name: str, default: float) -> float:
    return float(os.getenv(f"MUSE_{name}", default))


class SelectionConfig:
    """Engine policy; callers cannot override these per request"""

    # ==================== QUALITY FLOORS ====================
    MIN_VOTE_COUNT = _env_int("MIN_VOTE_COUNT", 500)
    MIN_VOTE_AVERAGE = _env_float("MIN_VOTE_AVERAGE", 5.5)
    MIN_RUNTIME = _env_int("MIN_RUNTIME", 60)  # minutes

    # ==================== CANDIDATES ====================
    CANDIDATE_LIMIT = _env_int("CANDIDATE_LIMIT", 1000)

    # ==================== RECENCY ====================
    RECENT_PICKS_LIMIT = _env_int("RECENT_PICKS_LIMIT", 20)

    # ==================== FIRST PICK ====================
    FIRST_PICK_TOP_PERCENTILE = _env_float("FIRST_PICK_TOP_PERCENTILE", 0.3)
    FIRST_PICK_MIN_POOL = _env_int("FIRST_PICK_MIN_POOL", 10)

    # ==================== BROWSING ====================
    DEFAULT_BROWSE_LIMIT = 30
    MAX_BROWSE_LIMIT = 100

    # Inclusive year ranges; None means open-ended
    ERA_RANGES = {
        "1980-1989": (1980, 1989),
        "1990-1999": (1990, 1999),
        "2000-2009": (2000, 2009),
        "2010-2019": (2010, 2019),
        "2020-now": (2020, None),
    }

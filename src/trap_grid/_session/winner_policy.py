# Area: Session
"""
trap_grid._session.winner_policy — Winner determination
=======================================================

Deciding who won is a deployment parameter. The session service takes
a policy callable ``(GameSession) -> Role`` and has no built-in
default; pick one here or supply your own.

Provided policies:
- HitRatioPolicy: prober wins when hits / moves_made exceeds a threshold
  (0.5 means hits > moves_made / 2)
- HitThresholdPolicy: prober wins after a fixed number of hits
- MoveCountPolicy: prober wins when hits outnumber misses
"""

from __future__ import annotations
from typing import Callable, Optional

from ..errors import InvalidArgumentError
from .enums import Role
from .models import GameSession

WinnerPolicy = Callable[[GameSession], Role]


class HitRatioPolicy:
    """Prober wins when hits / moves_made > threshold."""

    def __init__(self, threshold: float = 0.5, tie_winner: Role = Role.HOLDER):
        if not 0.0 <= threshold <= 1.0:
            raise InvalidArgumentError("threshold must be in [0, 1]", field="winner_threshold", value=threshold)
        self.threshold = threshold
        self.tie_winner = tie_winner

    def __call__(self, session: GameSession) -> Role:
        if session.moves_made == 0:
            return self.tie_winner
        ratio = session.hits / session.moves_made
        if ratio == self.threshold:
            return self.tie_winner
        return Role.PROBER if ratio > self.threshold else Role.HOLDER


class HitThresholdPolicy:
    """Prober wins once it has at least ``min_hits`` verified hits."""

    def __init__(self, min_hits: int):
        if min_hits < 1:
            raise InvalidArgumentError("min_hits must be at least 1", field="winner_threshold", value=min_hits)
        self.min_hits = min_hits

    def __call__(self, session: GameSession) -> Role:
        return Role.PROBER if session.hits >= self.min_hits else Role.HOLDER


class MoveCountPolicy:
    """Prober wins when hits outnumber misses; ties go to ``tie_winner``."""

    def __init__(self, tie_winner: Role = Role.HOLDER):
        self.tie_winner = tie_winner

    def __call__(self, session: GameSession) -> Role:
        if session.hits == session.misses:
            return self.tie_winner
        return Role.PROBER if session.hits > session.misses else Role.HOLDER


POLICY_NAMES = ("hit_ratio", "hit_threshold", "move_count")


def build_winner_policy(
    name: str,
    threshold: Optional[float] = None,
    tie_winner: Role = Role.HOLDER,
) -> WinnerPolicy:
    """
    Build a policy by name.

    Args:
        name: One of POLICY_NAMES
        threshold: Ratio for hit_ratio, hit count for hit_threshold
        tie_winner: Who wins exact ties where the policy has them

    Raises:
        InvalidArgumentError: Unknown name or missing threshold
    """
    if name == "hit_ratio":
        if threshold is None:
            raise InvalidArgumentError("hit_ratio needs a threshold", field="winner_threshold", value=None)
        return HitRatioPolicy(threshold, tie_winner)
    if name == "hit_threshold":
        if threshold is None:
            raise InvalidArgumentError("hit_threshold needs a threshold", field="winner_threshold", value=None)
        return HitThresholdPolicy(int(threshold))
    if name == "move_count":
        return MoveCountPolicy(tie_winner)
    raise InvalidArgumentError(f"unknown winner policy, expected one of {POLICY_NAMES}", field="winner_policy", value=name)

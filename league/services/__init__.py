# Points ledger services
from league.services.points_rules import recompute_match_points, evaluate_match
from league.services.monthly_bonus import apply_monthly_bonuses
from league.services.leaderboard import build_leaderboard, match_points_breakdown
from league.services.periods import Period

__all__ = [
    'recompute_match_points',
    'evaluate_match',
    'apply_monthly_bonuses',
    'build_leaderboard',
    'match_points_breakdown',
    'Period',
]

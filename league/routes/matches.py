"""
Score entry.

Entering a score is what triggers the points recompute for a match.
"""

from flask import Blueprint, request, jsonify, current_app
from league import db
from league.errors import LeagueError, MatchNotFound
from league.models import Match
from league.services import recompute_match_points

matches_bp = Blueprint('matches', __name__, url_prefix='/matches')


@matches_bp.errorhandler(LeagueError)
def handle_league_error(e):
    if e.status_code >= 500:
        current_app.logger.error(f"Score entry error on {request.path}: {e}")
    return jsonify({'success': False, 'error': str(e)}), e.status_code


def _parse_goals(data, key):
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        return None
    return value


@matches_bp.route('/<int:match_id>/score', methods=['POST'])
def enter_score(match_id):
    """
    Record the final score and recompute the match's points.

    JSON body:
        team_a_goals: Goals for side A (int >= 0)
        team_b_goals: Goals for side B (int >= 0)
    """
    match = db.session.get(Match, match_id)
    if not match:
        raise MatchNotFound(match_id)

    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    team_a_goals = _parse_goals(data, 'team_a_goals')
    team_b_goals = _parse_goals(data, 'team_b_goals')
    if team_a_goals is None or team_b_goals is None:
        return jsonify({
            'success': False,
            'error': 'team_a_goals and team_b_goals must be non-negative integers'
        }), 400

    # Uncommitted; saved by the recompute transaction or rolled back with it
    match.record_score(team_a_goals, team_b_goals)
    entries = recompute_match_points(match.id)
    current_app.logger.info(f"Score entered for match {match_id}: {team_a_goals}-{team_b_goals}")

    return jsonify({
        'success': True,
        'match_id': match_id,
        'score': {'team_a': team_a_goals, 'team_b': team_b_goals},
        'entries_written': len(entries)
    })

"""
API routes for the points ledger.

Includes:
- Match points recompute and per-match breakdown
- Monthly perfect attendance bonus pass
- Monthly leaderboard
"""

from flask import Blueprint, request, jsonify, current_app
from league.errors import LeagueError
from league.services import (
    apply_monthly_bonuses,
    build_leaderboard,
    match_points_breakdown,
    recompute_match_points,
)

api_bp = Blueprint('api', __name__, url_prefix='/api')


@api_bp.errorhandler(LeagueError)
def handle_league_error(e):
    """Return service errors as JSON with the error's status code."""
    if e.status_code >= 500:
        current_app.logger.error(f"API error on {request.path}: {e}")
    return jsonify({'success': False, 'error': str(e)}), e.status_code


@api_bp.route('/matches/<int:match_id>/recompute', methods=['POST'])
def recompute_match(match_id):
    """
    Regenerate all points entries for a match.

    Returns:
        JSON with 'success', 'match_id' and the 'entries' written
    """
    entries = recompute_match_points(match_id)
    return jsonify({
        'success': True,
        'match_id': match_id,
        'entries': [entry.to_dict() for entry in entries]
    })


@api_bp.route('/matches/<int:match_id>/points')
def match_points(match_id):
    """Points breakdown per player for one match."""
    rows = match_points_breakdown(match_id)
    return jsonify({
        'success': True,
        'match_id': match_id,
        'players': [row.to_dict() for row in rows]
    })


@api_bp.route('/bonuses/<int:year>/<int:month>', methods=['POST'])
def apply_bonuses(year, month):
    """Run the perfect attendance bonus pass for a month. Safe to repeat."""
    created = apply_monthly_bonuses(year, month)
    return jsonify({
        'success': True,
        'period': f'{year:04d}-{month:02d}',
        'created': [entry.to_dict() for entry in created]
    })


@api_bp.route('/leaderboard')
def leaderboard():
    """
    Monthly leaderboard.

    Query params:
        year: Calendar year (required)
        month: Calendar month 1-12 (required)
    """
    year = request.args.get('year', type=int)
    month = request.args.get('month', type=int)

    if year is None or month is None:
        return jsonify({
            'success': False,
            'error': 'year and month query parameters are required'
        }), 400

    rows = build_leaderboard(year, month)
    return jsonify({
        'success': True,
        'year': year,
        'month': month,
        'entries': [row.to_dict() for row in rows]
    })

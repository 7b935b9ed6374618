"""Tests for the JSON endpoints and CLI commands."""

from datetime import datetime

from sqlalchemy.exc import OperationalError

from league import db
from league.models import Match, PointsEntry, RsvpStatus, TeamSide
from league.models.points_entry import REASON_PERFECT_ATTENDANCE


def _database_down(*args, **kwargs):
    raise OperationalError('INSERT INTO points_entries', {}, Exception('database is locked'))


def _march_match(build, score=None):
    player = build.player('P')
    match = build.match(when=datetime(2024, 3, 5, 19, 0), score=score)
    build.rsvp(match, player, RsvpStatus.WILL_ATTEND)
    build.played(match, player, TeamSide.TEAM_A)
    return match, player


class TestApi:
    """Endpoints for the three ledger operations."""

    def test_health(self, client):
        response = client.get('/health')
        assert response.status_code == 200
        assert response.get_json()['status'] == 'healthy'

    def test_recompute(self, client, build):
        match, player = _march_match(build, score=(3, 1))

        response = client.post(f'/api/matches/{match.id}/recompute')

        assert response.status_code == 200
        data = response.get_json()
        assert data['success'] is True
        assert sorted(e['points'] for e in data['entries']) == [1.5, 2.0, 3.0]

    def test_recompute_unknown_match(self, client, app):
        response = client.post('/api/matches/999/recompute')

        assert response.status_code == 404
        assert response.get_json() == {'success': False, 'error': 'Match 999 not found'}

    def test_recompute_storage_failure(self, client, build, monkeypatch):
        match, player = _march_match(build, score=(3, 1))
        monkeypatch.setattr('league.services.points_rules.evaluate_match', _database_down)

        response = client.post(f'/api/matches/{match.id}/recompute')

        assert response.status_code == 503
        data = response.get_json()
        assert data['success'] is False
        assert data['error'].startswith(f'Storage failure during recompute match {match.id}')
        assert PointsEntry.query.count() == 0

    def test_match_points(self, client, build):
        match, player = _march_match(build, score=(2, 2))
        client.post(f'/api/matches/{match.id}/recompute')

        data = client.get(f'/api/matches/{match.id}/points').get_json()

        assert data['players'][0]['player_name'] == 'P'
        assert data['players'][0]['total_points'] == 4.0

    def test_bonuses_exactly_once(self, client, build):
        match, player = _march_match(build, score=(1, 0))
        client.post(f'/api/matches/{match.id}/recompute')

        first = client.post('/api/bonuses/2024/3').get_json()
        second = client.post('/api/bonuses/2024/3').get_json()

        assert len(first['created']) == 1
        assert first['created'][0]['points'] == 5.0
        assert second['created'] == []
        assert PointsEntry.query.filter_by(reason=REASON_PERFECT_ATTENDANCE).count() == 1

    def test_bonuses_invalid_month(self, client, app):
        response = client.post('/api/bonuses/2024/13')

        assert response.status_code == 400
        assert response.get_json()['success'] is False

    def test_leaderboard(self, client, build):
        match, player = _march_match(build, score=(3, 1))
        client.post(f'/api/matches/{match.id}/recompute')

        data = client.get('/api/leaderboard?year=2024&month=3').get_json()

        assert data['success'] is True
        row = data['entries'][0]
        assert row['rank'] == 1
        assert row['player_name'] == 'P'
        assert row['total_points'] == 11.5
        assert row['bonus_points'] == 6.5
        assert row['matches_played'] == 1

    def test_leaderboard_requires_period(self, client, app):
        response = client.get('/api/leaderboard?year=2024')

        assert response.status_code == 400

    def test_leaderboard_invalid_month(self, client, app):
        response = client.get('/api/leaderboard?year=2024&month=0')

        assert response.status_code == 400


class TestScoreEntry:
    """Entering a score triggers the recompute."""

    def test_enter_score(self, client, build):
        match, player = _march_match(build)

        response = client.post(f'/matches/{match.id}/score', json={'team_a_goals': 3, 'team_b_goals': 1})

        assert response.status_code == 200
        data = response.get_json()
        assert data['score'] == {'team_a': 3, 'team_b': 1}
        assert data['entries_written'] == 3
        refreshed = db.session.get(Match, match.id)
        assert refreshed.is_finished
        assert refreshed.score == (3, 1)

    def test_enter_score_rejects_bad_goals(self, client, build):
        match, player = _march_match(build)

        for payload in ({'team_a_goals': -1, 'team_b_goals': 0}, {'team_a_goals': 2}, {'team_a_goals': '2', 'team_b_goals': 1}):
            response = client.post(f'/matches/{match.id}/score', json=payload)
            assert response.status_code == 400

        assert PointsEntry.query.count() == 0

    def test_enter_score_rejects_non_object_body(self, client, build):
        match, player = _march_match(build)

        response = client.post(f'/matches/{match.id}/score', json=[1, 2])

        assert response.status_code == 400
        assert response.get_json()['success'] is False

    def test_failed_recompute_keeps_old_score(self, client, build, monkeypatch):
        match, player = _march_match(build)
        monkeypatch.setattr('league.services.points_rules.evaluate_match', _database_down)

        response = client.post(f'/matches/{match.id}/score', json={'team_a_goals': 2, 'team_b_goals': 0})

        assert response.status_code == 503
        assert response.get_json()['success'] is False
        refreshed = db.session.get(Match, match.id)
        assert refreshed.team_a_goals is None
        assert refreshed.team_b_goals is None
        assert not refreshed.is_finished
        assert PointsEntry.query.count() == 0

    def test_enter_score_unknown_match(self, client, app):
        response = client.post('/matches/42/score', json={'team_a_goals': 1, 'team_b_goals': 0})

        assert response.status_code == 404


class TestCli:
    """flask CLI commands."""

    def test_recompute_and_leaderboard(self, runner, build):
        match, player = _march_match(build, score=(3, 1))

        result = runner.invoke(args=['recompute-match', str(match.id)])
        assert result.exit_code == 0
        assert '3 points entries written' in result.output

        result = runner.invoke(args=['apply-bonuses', '2024', '3'])
        assert '1 bonuses granted' in result.output

        result = runner.invoke(args=['leaderboard', '2024', '3'])
        assert result.exit_code == 0
        assert 'P' in result.output
        assert '11.5' in result.output

    def test_recompute_unknown_match(self, runner, app):
        result = runner.invoke(args=['recompute-match', '77'])

        assert result.exit_code != 0
        assert 'Match 77 not found' in result.output

    def test_empty_leaderboard(self, runner, app):
        result = runner.invoke(args=['leaderboard', '2030', '1'])

        assert 'No points recorded for 2030-01' in result.output

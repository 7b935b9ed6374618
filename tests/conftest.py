"""Shared test fixtures."""

from datetime import datetime

import pytest

from league import create_app, db
from league.models import Attendance, Match, Player, PointsEntry, Rsvp, RsvpStatus, TeamSide


class LeagueBuilder:
    """Creates and commits league records with sensible defaults."""

    def player(self, name, active=True) -> Player:
        player = Player(name=name, is_active=active)
        db.session.add(player)
        db.session.commit()
        return player

    def match(self, when=None, score=None, finished=False) -> Match:
        match = Match(match_date=when or datetime(2024, 3, 5, 19, 0), is_finished=finished)
        if score is not None:
            match.record_score(*score)
        db.session.add(match)
        db.session.commit()
        return match

    def rsvp(self, match, player, status=RsvpStatus.WILL_ATTEND) -> Rsvp:
        rsvp = Rsvp(match_id=match.id, player_id=player.id, status=status)
        db.session.add(rsvp)
        db.session.commit()
        return rsvp

    def played(self, match, player, team=TeamSide.TEAM_A, late=False) -> Attendance:
        attendance = Attendance(match_id=match.id, player_id=player.id, team=team, is_late=late)
        db.session.add(attendance)
        db.session.commit()
        return attendance


def _ledger(match_id=None, player_id=None):
    """Ledger rows as sorted (player_id, reason, points) tuples."""
    query = PointsEntry.query
    if match_id is not None:
        query = query.filter_by(match_id=match_id)
    if player_id is not None:
        query = query.filter_by(player_id=player_id)
    return sorted((e.player_id, e.reason, e.points) for e in query.all())


@pytest.fixture
def app():
    """Application bound to a fresh in-memory database."""
    app = create_app('testing')
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def runner(app):
    return app.test_cli_runner()


@pytest.fixture
def build(app):
    return LeagueBuilder()


@pytest.fixture
def ledger(app):
    """Function returning ledger rows as sorted (player_id, reason, points) tuples."""
    return _ledger

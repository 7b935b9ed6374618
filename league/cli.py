"""
Flask CLI commands for running the points ledger from cron or a shell.

    flask --app league recompute-match 12
    flask --app league apply-bonuses 2024 3
    flask --app league leaderboard 2024 3
"""

import click

from league import db
from league.errors import LeagueError


def register_commands(app):
    """Attach the league commands to the app's CLI group."""

    @app.cli.command('init-db')
    def init_db():
        """Create all tables (development databases without migrations)."""
        db.create_all()
        click.echo('Database tables created.')

    @app.cli.command('recompute-match')
    @click.argument('match_id', type=int)
    def recompute_match(match_id):
        """Regenerate all points entries for MATCH_ID."""
        from league.services import recompute_match_points
        try:
            entries = recompute_match_points(match_id)
        except LeagueError as e:
            raise click.ClickException(str(e))
        click.echo(f'Match {match_id}: {len(entries)} points entries written.')

    @app.cli.command('apply-bonuses')
    @click.argument('year', type=int)
    @click.argument('month', type=int)
    def apply_bonuses(year, month):
        """Grant perfect attendance bonuses for YEAR MONTH."""
        from league.services import apply_monthly_bonuses
        try:
            created = apply_monthly_bonuses(year, month)
        except LeagueError as e:
            raise click.ClickException(str(e))
        click.echo(f'{year:04d}-{month:02d}: {len(created)} bonuses granted.')

    @app.cli.command('leaderboard')
    @click.argument('year', type=int)
    @click.argument('month', type=int)
    def leaderboard(year, month):
        """Print the leaderboard for YEAR MONTH."""
        from league.services import build_leaderboard
        try:
            rows = build_leaderboard(year, month)
        except LeagueError as e:
            raise click.ClickException(str(e))

        if not rows:
            click.echo(f'No points recorded for {year:04d}-{month:02d}.')
            return

        click.echo(f"{'#':>3}  {'Player':<24}{'MP':>4}{'W':>4}{'D':>4}{'L':>4}{'Late':>6}{'NS':>4}{'Bonus':>8}{'Total':>8}")
        for row in rows:
            click.echo(
                f'{row.rank:>3}  {row.player_name:<24}{row.matches_played:>4}{row.wins:>4}'
                f'{row.draws:>4}{row.losses:>4}{row.late_arrivals:>6}{row.no_shows:>4}'
                f'{float(row.bonus_points):>8.1f}{float(row.total_points):>8.1f}'
            )

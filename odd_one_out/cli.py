"""Flask CLI commands."""
import click
from flask import Flask


def register_commands(app: Flask) -> None:
    """Attach management commands to ``app.cli``.

    Args:
        app: The Flask application instance.
    """

    @app.cli.command("seed-word-pairs")
    def seed_word_pairs_command() -> None:
        """Load the default word pool into an empty word_pairs table."""
        from .services.word_pair_service import seed_word_pairs
        inserted = seed_word_pairs()
        if inserted:
            click.echo(f"Inserted {inserted} word pairs.")
        else:
            click.echo("Word pool already populated; nothing to do.")

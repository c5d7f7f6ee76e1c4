import logging

import click
import orjson
import sentry_sdk
from dateutil import parser as date_parser
from pydantic import ValidationError

from gravifon import config
from gravifon.background.remove_unregistered_users import remove_unregistered_users as remove_users
from gravifon.db import couchdb
from gravifon.db.albums import AlbumsDBClient
from gravifon.db.artists import ArtistsDBClient
from gravifon.db.exceptions import GravifonException
from gravifon.db.labels import LabelsDBClient
from gravifon.db.scrobbles import ScrobblesDBClient
from gravifon.db.tracks import TracksDBClient
from gravifon.db.users import UsersDBClient


def init_store():
    """ Configure logging, error reporting and the couchdb connection from config. """
    logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    if config.SENTRY_DSN:
        sentry_sdk.init(dsn=config.SENTRY_DSN)
    couchdb.init(config.COUCHDB_USER, config.COUCHDB_ADMIN_KEY, config.COUCHDB_HOST, config.COUCHDB_PORT)


def parse_datetime(ctx, param, value):
    if value is None:
        return None
    try:
        parsed = date_parser.isoparse(value)
    except ValueError:
        raise click.BadParameter(f"'{value}' is not an ISO 8601 datetime")
    if parsed.tzinfo is None:
        raise click.BadParameter(f"'{value}' must contain a timezone, e.g. 2013-05-01T00:00:00Z")
    return parsed


def echo_json(data):
    click.echo(orjson.dumps(data, option=orjson.OPT_INDENT_2).decode("utf-8"))


@click.group()
def cli():
    pass


@cli.command(name="init_db")
@click.option("--force", "-f", is_flag=True, help="Drop existing databases first.")
def init_db(force):
    """Initializes the document store.

    Creates all databases, the views are maintained by the store itself.
    """
    init_store()
    couchdb.check_connection()
    couchdb.setup_databases(setup=True, cleanup=force or config.COUCHDB_CLEANUP)
    click.echo("Done!")


@cli.command(name="info")
def info():
    """Print the number of stored entities."""
    init_store()
    echo_json({
        "user_amount": UsersDBClient().retrieve_user_amount(),
        "scrobble_amount": ScrobblesDBClient().retrieve_scrobble_amount(),
        "artist_amount": ArtistsDBClient().retrieve_primary_artist_variation_amount(),
        "album_amount": AlbumsDBClient().retrieve_primary_album_variation_amount(),
        "track_amount": TracksDBClient().retrieve_primary_track_variation_amount(),
        "label_amount": LabelsDBClient().retrieve_primary_label_variation_amount(),
    })


@cli.command(name="scrobbles")
@click.argument("user_id")
@click.option("--start", callback=parse_datetime, help="Earliest scrobble start datetime, ISO 8601.")
@click.option("--end", callback=parse_datetime, help="Latest scrobble start datetime, ISO 8601.")
@click.option("--cursor", help="The next token of the previous page.")
@click.option("--ascending", is_flag=True, help="Oldest scrobbles first.")
@click.option("--limit", type=int, help="Page size.")
def scrobbles(user_id, start, end, cursor, ascending, limit):
    """Print one page of scrobbles of a user."""
    init_store()
    try:
        page = ScrobblesDBClient().retrieve_scrobbles_by_user_id(
            user_id, cursor=cursor, range_start=start, range_end=end, ascending=ascending, limit=limit
        )
    except GravifonException as e:
        raise click.ClickException(str(e))
    except ValidationError as e:
        raise click.UsageError(str(e))
    echo_json(page.model_dump(mode="json", by_alias=True, exclude_none=True))


@cli.command(name="remove_unregistered_users")
@click.option("--threshold", type=int, default=config.REGISTRATION_THRESHOLD_HOURS, show_default=True,
              help="Hours a user has to complete the registration.")
def remove_unregistered_users(threshold):
    """Remove users who did not complete their registration in time."""
    init_store()
    removed = remove_users(UsersDBClient(), threshold)
    click.echo(f"Removed {removed} users.")


if __name__ == "__main__":
    cli()

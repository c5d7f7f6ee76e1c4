import logging
from typing import Optional

import orjson
import requests

from gravifon.db.exceptions import DatabaseException

logger = logging.getLogger(__name__)

USERS_DATABASE = "users"
SCROBBLES_DATABASE = "scrobbles"
ARTISTS_DATABASE = "artists"
ALBUMS_DATABASE = "albums"
TRACKS_DATABASE = "tracks"
LABELS_DATABASE = "labels"

ALL_DATABASES = [
    USERS_DATABASE,
    SCROBBLES_DATABASE,
    ARTISTS_DATABASE,
    ALBUMS_DATABASE,
    TRACKS_DATABASE,
    LABELS_DATABASE,
]

_host = None
_port = None
_session: Optional[requests.Session] = None


def init(user, password, host, port):
    """
    Initialize config to connect to couchdb instance.

    Args:
        user: couchdb admin user name
        password: couchdb admin password
        host: couchdb service host
        port: couchdb service port
    """
    global _host, _port, _session
    _host = host
    _port = port

    if _session is not None:
        _session.close()
    _session = requests.Session()
    _session.auth = (user, password)
    _session.headers["Accept"] = "application/json"
    _session.hooks["response"] = [_log_response_hook]


def get_session() -> requests.Session:
    if _session is None:
        raise RuntimeError("couchdb.init() must be called before talking to the store")
    return _session


def get_base_url():
    return f"http://{_host}:{_port}"


def get_database_url(database: str):
    return f"{get_base_url()}/{database}"


def get_view_url(database: str, design_doc: str, view: str):
    """ Build the target of a design document view of a database. """
    return f"{get_database_url(database)}/_design/{design_doc}/_view/{view}"


def is_successful(response: requests.Response) -> bool:
    """ Whether the store accepted the request, i.e. answered with any 2xx status. """
    if response is None:
        raise ValueError("response must not be None")
    return 200 <= response.status_code < 300


def _log_response_hook(r, *args, **kwargs):
    if not logger.isEnabledFor(logging.DEBUG):
        return

    # reading the body here buffers it, later reads get the cached content
    entity = "<no entity>"
    if r.headers.get("Content-Type", "").startswith("application/json"):
        entity = r.text
    logger.debug("Database response:\n[%s] %s\n%s", r.status_code, r.reason, entity)


def check_connection():
    """ Check that the configured couchdb instance is reachable and log its version. """
    logger.info("Connecting to CouchDB instance at %s", get_base_url())
    with get_session().get(get_base_url()) as response:
        logger.info("Response status code: %s", response.status_code)
        if not is_successful(response):
            logger.error("Failure reason: %s", response.reason)
            raise DatabaseException("DB layer initialization failed", operation="connect",
                                    status_code=response.status_code, reason=response.reason)

        if response.content:
            logger.info("CouchDB version: %s", orjson.loads(response.content).get("version"))
        else:
            logger.warning("No response entity returned from CouchDB instance.")


def create_database(database: str):
    """ Create a couchdb database with the given name, an existing database is left as is. """
    with get_session().put(get_database_url(database)) as response:
        if is_successful(response):
            logger.info("'%s' database created", database)
        elif response.status_code == 412:
            logger.info("'%s' database already exists", database)
        else:
            logger.error("Failed to create %s database: [%s] %s", database, response.status_code, response.reason)
            raise DatabaseException("Failed to create database.", operation="create", entity=database,
                                    status_code=response.status_code, reason=response.reason)


def drop_database(database: str):
    """ Delete the couchdb database with the given name along with all its documents. """
    with get_session().delete(get_database_url(database)) as response:
        if is_successful(response):
            logger.info("'%s' database dropped", database)
        elif response.status_code == 404:
            logger.info("'%s' database does not exist", database)
        else:
            logger.error("Failed to drop %s database: [%s] %s", database, response.status_code, response.reason)
            raise DatabaseException("Failed to drop database.", operation="delete", entity=database,
                                    status_code=response.status_code, reason=response.reason)


def setup_databases(setup: bool, cleanup: bool):
    """ Prepare the store content on startup.

    Args:
        setup: create all databases (existing ones are kept)
        cleanup: drop all databases first
    """
    if cleanup:
        logger.info("Initiating DB cleanup")
        for database in ALL_DATABASES:
            drop_database(database)

    if setup:
        logger.info("Initiating DB setup")
        for database in ALL_DATABASES:
            create_database(database)

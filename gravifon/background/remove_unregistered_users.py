import logging
import time
from datetime import timedelta

import requests

from gravifon.db.exceptions import GravifonException
from gravifon.db.users import UsersDBClient

logger = logging.getLogger(__name__)


def remove_unregistered_users(users_client: UsersDBClient, threshold_hours: int) -> int:
    """ Delete users who did not complete their registration within ``threshold_hours``.

    Meant to be run periodically. If the store fails midway the run stops, the remaining
    users are picked up by the next run.

    Returns:
        the number of users removed
    """
    start = time.monotonic()
    threshold = timedelta(hours=threshold_hours)
    removed = 0

    try:
        cursor = None
        while True:
            page = users_client.retrieve_users_failed_to_complete_registration(threshold, cursor=cursor)
            for user in page.items:
                users_client.delete(user)
                removed += 1
                logger.debug("%s user removed", user)

            if page.next is None:
                break
            cursor = page.next
    except (GravifonException, requests.RequestException):
        logger.warning("Exception occurred during task execution", exc_info=True)

    logger.info("Task executed (duration: %d ms, users removed: %d)", (time.monotonic() - start) * 1000, removed)
    return removed

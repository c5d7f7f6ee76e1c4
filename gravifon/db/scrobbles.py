from datetime import datetime
from typing import Optional

from gravifon.db import couchdb
from gravifon.db.document_client import DocumentClient
from gravifon.db.model.scrobble import ScrobbleDocument
from gravifon.db.range_query import Page, PageRequest, composite_key, parse_cursor
from gravifon.utils import datetime_to_array, generate_unique_identifier

ALL_SCROBBLES_VIEW = "all_scrobbles"
# key: [user_id, scrobble_start_datetime]
USER_SCROBBLES_VIEW = "user_scrobbles"


class ScrobblesDBClient(DocumentClient[ScrobbleDocument]):

    database = couchdb.SCROBBLES_DATABASE
    document_type = ScrobbleDocument

    def retrieve_scrobble_amount(self) -> int:
        return self.retrieve_size(self.view_url(ALL_SCROBBLES_VIEW))

    def create_scrobble(self, scrobble: ScrobbleDocument) -> ScrobbleDocument:
        # scrobble ids are assigned here rather than by the store
        if scrobble.id is None:
            scrobble.id = generate_unique_identifier()
        return self.create(scrobble)

    def retrieve_scrobble_by_id(self, scrobble_id: str) -> Optional[ScrobbleDocument]:
        return self.retrieve(scrobble_id)

    def retrieve_scrobbles_by_key(self, user_id: str, scrobble_start_datetime: datetime) -> list[ScrobbleDocument]:
        """ Retrieve the scrobbles of a user that started at exactly the given instant. """
        key = composite_key(user_id, datetime_to_array(scrobble_start_datetime))
        return self.retrieve_by_key(self.view_url(USER_SCROBBLES_VIEW), key)

    def retrieve_scrobbles_by_user_id(self,
                                      user_id: str,
                                      cursor: Optional[str] = None,
                                      range_start: Optional[datetime] = None,
                                      range_end: Optional[datetime] = None,
                                      ascending: bool = False,
                                      limit: Optional[int] = None) -> Page[ScrobbleDocument]:
        """ Retrieve one page of scrobbles of a user, ordered by start datetime.

        Args:
            user_id: the user to retrieve scrobbles for
            cursor: the ``next`` token of the previous page, if any
            range_start: include scrobbles that started at or after this instant
            range_end: include scrobbles that started at or before this instant
            ascending: oldest first if True, newest first otherwise
            limit: the page size

        Returns:
            the scrobbles of the page; ``next`` is None if the range is exhausted

        Raises:
            BadCursorException: if the cursor is not a valid token
        """
        request = PageRequest(
            scope_id=user_id,
            cursor=parse_cursor(cursor),
            range_start=range_start,
            range_end=range_end,
            ascending=ascending,
            limit=limit,
        )
        return self.retrieve_page(self.view_url(USER_SCROBBLES_VIEW), request)

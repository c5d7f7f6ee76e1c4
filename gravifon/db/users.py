from datetime import datetime, timedelta, timezone
from typing import Optional

from gravifon.db import couchdb
from gravifon.db.document_client import DocumentClient
from gravifon.db.model.user import UserDocument, UserStatus
from gravifon.db.range_query import Page, PageRequest, parse_cursor
from gravifon.utils import lower_case

# key: lower cased username
ALL_USERNAMES_VIEW = "all_usernames"
# key: [status, registration_datetime]
USERS_BY_STATUS_VIEW = "users_by_status_and_registration_datetime"


class UsersDBClient(DocumentClient[UserDocument]):

    database = couchdb.USERS_DATABASE
    document_type = UserDocument

    def retrieve_user_amount(self) -> int:
        return self.retrieve_size(self.view_url(ALL_USERNAMES_VIEW))

    def retrieve_user_by_id(self, user_id: str) -> Optional[UserDocument]:
        return self.retrieve(user_id)

    def retrieve_user_by_username(self, username: str) -> Optional[UserDocument]:
        documents = self.retrieve_by_key(self.view_url(ALL_USERNAMES_VIEW), lower_case(username))
        # usernames are unique, so don't care about multiple results
        return documents[0] if documents else None

    def retrieve_users_failed_to_complete_registration(self,
                                                       threshold: timedelta,
                                                       cursor: Optional[str] = None,
                                                       limit: Optional[int] = None) -> Page[UserDocument]:
        """ Retrieve one page of users that registered more than ``threshold`` ago
        but never confirmed their registration, oldest registrations first.
        """
        request = PageRequest(
            scope_id=UserStatus.CREATED.value,
            cursor=parse_cursor(cursor),
            range_end=datetime.now(timezone.utc) - threshold,
            ascending=True,
            limit=limit,
        )
        return self.retrieve_page(self.view_url(USERS_BY_STATUS_VIEW), request)

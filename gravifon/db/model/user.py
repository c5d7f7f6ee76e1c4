from enum import Enum
from typing import Optional

from pydantic import BaseModel

from gravifon.db.model.document import CouchDBDocument
from gravifon.db.model.validators import DatetimeArray


class UserStatus(Enum):
    CREATED = "Created"
    ACTIVE = "Active"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            for status in cls:
                if status.value.lower() == value.lower():
                    return status
        return None


class SaltedHash(BaseModel):
    hash: str
    salt: str


class UserDocument(CouchDBDocument):
    username: str
    status: UserStatus = UserStatus.CREATED
    fullname: Optional[str] = None
    password_hash: Optional[SaltedHash] = None
    email: Optional[str] = None
    registration_key: Optional[str] = None
    registration_datetime: Optional[DatetimeArray] = None

    def __str__(self):
        # never log password hashes or registration keys
        return f"{{id={self.id}, username={self.username}, status={self.status.value}}}"

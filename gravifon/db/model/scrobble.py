from typing import Optional

from gravifon.db.model.document import CouchDBDocument
from gravifon.db.model.duration import Duration
from gravifon.db.model.validators import DatetimeArray


class ScrobbleDocument(CouchDBDocument):
    """ A single listening event of a user.

    Start and end of the event are stored as calendar arrays, the start array is also
    the sub-key of the scrobble in the user_scrobbles view.
    """
    user_id: Optional[str] = None
    scrobble_start_datetime: DatetimeArray
    scrobble_end_datetime: Optional[DatetimeArray] = None
    scrobble_duration: Optional[Duration] = None
    track_id: Optional[str] = None

    def __str__(self):
        return f"{{id={self.id}, user_id={self.user_id}, start={self.scrobble_start_datetime}, track_id={self.track_id}}}"

from typing import Optional, List

from gravifon.db.model.document import VariableDocument
from gravifon.db.model.duration import Duration


class TrackDocument(VariableDocument):
    title: str
    artist_ids: Optional[List[str]] = None
    length: Optional[Duration] = None
    album_id: Optional[str] = None
    position: Optional[str] = None

    def __str__(self):
        return f"{{id={self.id}, title={self.title}, album_id={self.album_id}}}"

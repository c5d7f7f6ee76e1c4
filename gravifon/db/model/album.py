from typing import Optional, List

from gravifon.db.model.document import VariableDocument
from gravifon.db.model.label import Label
from gravifon.db.model.validators import DateArray


class AlbumDocument(VariableDocument):
    title: str
    artist_ids: Optional[List[str]] = None
    release_date: Optional[DateArray] = None
    labels: Optional[List[Label]] = None
    track_ids: Optional[List[str]] = None
    type: Optional[str] = None

    def __str__(self):
        return f"{{id={self.id}, title={self.title}}}"

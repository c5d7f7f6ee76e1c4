from typing import Optional, List

from gravifon.db.model.document import VariableDocument


class ArtistDocument(VariableDocument):
    name: str
    subname: Optional[str] = None
    subartist_ids: Optional[List[str]] = None
    alias_ids: Optional[List[str]] = None

    def __str__(self):
        return f"{{id={self.id}, name={self.name}}}"

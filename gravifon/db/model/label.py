from typing import Optional

from pydantic import BaseModel

from gravifon.db.model.document import VariableDocument


class Label(BaseModel):
    """ Reference from an album to a label, with the album's catalog number on that label. """
    id: Optional[str] = None
    catalog_id: Optional[str] = None


class LabelDocument(VariableDocument):
    name: str

    def __str__(self):
        return f"{{id={self.id}, name={self.name}}}"

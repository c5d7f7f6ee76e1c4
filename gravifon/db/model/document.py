from typing import Optional, List

from pydantic import BaseModel, ConfigDict, Field


class CouchDBDocument(BaseModel):
    """ Base of every document stored in couchdb.

    Args:
        id: the document id, None if the document was never stored
        revision: the revision the store assigned on the last successful write,
            it has to be sent back on update and delete
    """
    # ignore unknown fields so that documents do not depend on a particular couchdb release
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: Optional[str] = Field(default=None, alias="_id")
    revision: Optional[str] = Field(default=None, alias="_rev")

    def to_document(self) -> dict:
        """ Serialize to the json document sent to the store, unset fields are left out. """
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class VariationInfo(BaseModel):
    """ Duplicate entity bookkeeping, maintained outside of this package. """
    key: Optional[List[str]] = None
    upvotes: Optional[List[dict]] = None
    primary_variation_id: Optional[str] = None
    variation_ids: Optional[List[str]] = None


class VariableDocument(CouchDBDocument):
    variation_info: Optional[VariationInfo] = None

import logging
from typing import Generic, Optional, Type, TypeVar

import orjson
import requests

from gravifon.db import couchdb, view_query_executor
from gravifon.db import range_query
from gravifon.db.exceptions import ConflictException, DatabaseException
from gravifon.db.model.document import CouchDBDocument
from gravifon.db.view_query_arguments import ViewQueryArguments

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=CouchDBDocument)

JSON_HEADERS = {"Content-Type": "application/json"}


class DocumentClient(Generic[T]):
    """ Create, retrieve, update and delete documents of one couchdb database.

    Subclasses bind the database name and document type, and add the view queries
    of the entity they store.
    """

    database: str = None
    document_type: Type[T] = None

    MAIN_DESIGN_DOC = "main"

    @property
    def database_url(self):
        return couchdb.get_database_url(self.database)

    def view_url(self, view: str, design_doc: str = MAIN_DESIGN_DOC):
        return couchdb.get_view_url(self.database, design_doc, view)

    @property
    def document_name(self):
        return self.document_type.__name__

    def _fail(self, operation: str, document, response: requests.Response):
        logger.error("Failed to %s %s ('%s'): [%s] %s", operation, self.document_name, document,
                     response.status_code, response.reason)
        exception_class = ConflictException if response.status_code == 409 else DatabaseException
        raise exception_class(f"Failed to {operation} document.", operation=operation, entity=self.document_name,
                              status_code=response.status_code, reason=response.reason)

    def create(self, document: T) -> T:
        """ Store a new document.

        The id is assigned by the store unless the document already carries one.

        Returns:
            the same document, with id and revision set
        """
        with couchdb.get_session().post(self.database_url, data=orjson.dumps(document.to_document()),
                                        headers=JSON_HEADERS) as response:
            if not couchdb.is_successful(response):
                self._fail("create", document, response)
            created = orjson.loads(response.content)

        document.id = created["id"]
        document.revision = created["rev"]
        logger.debug("%s created ('%s')", self.document_name, document)
        return document

    def retrieve(self, document_id: str) -> Optional[T]:
        """ Retrieve a document by id.

        Returns:
            the document, or None if there is no document with that id
        """
        with couchdb.get_session().get(f"{self.database_url}/{document_id}") as response:
            if response.status_code == 404:
                return None
            if not couchdb.is_successful(response):
                self._fail("retrieve", f"id={document_id}", response)
            document = self.document_type.model_validate(orjson.loads(response.content))

        logger.debug("%s retrieved ('%s')", self.document_name, document)
        return document

    def update(self, document: T) -> T:
        """ Overwrite a stored document.

        The document has to carry the revision of the latest write, otherwise the store
        rejects the update and ConflictException is raised.

        Returns:
            the same document, with the new revision set
        """
        with couchdb.get_session().put(f"{self.database_url}/{document.id}", data=orjson.dumps(document.to_document()),
                                       headers=JSON_HEADERS) as response:
            if not couchdb.is_successful(response):
                self._fail("update", document, response)
            updated = orjson.loads(response.content)

        document.revision = updated["rev"]
        logger.debug("%s updated ('%s')", self.document_name, document)
        return document

    def delete(self, document: T):
        """ Delete a stored document, the document has to carry its current revision. """
        if document.revision is None:
            raise ValueError("Cannot delete a document without revision.")

        with couchdb.get_session().delete(f"{self.database_url}/{document.id}",
                                          params={"rev": document.revision}) as response:
            if not couchdb.is_successful(response):
                self._fail("delete", document, response)

        logger.debug("%s deleted ('%s')", self.document_name, document)

    def retrieve_size(self, view_url: str) -> int:
        return view_query_executor.query_size(view_url)

    def retrieve_by_key(self, view_url: str, key) -> list[T]:
        """ Retrieve all documents of a view emitted under exactly the given key. """
        args = ViewQueryArguments() \
            .add_key(key) \
            .add_include_docs(True)
        return view_query_executor.query_documents(view_url, args, self.document_type)

    def retrieve_page(self, view_url: str, request: range_query.PageRequest) -> range_query.Page[T]:
        return range_query.retrieve_page(view_url, request, self.document_type)

from typing import Optional

from gravifon.db import couchdb, view_query_executor
from gravifon.db.document_client import DocumentClient
from gravifon.db.model.track import TrackDocument
from gravifon.db.view_query_arguments import ViewQueryArguments
from gravifon.utils import lower_case

ALL_PRIMARY_TRACK_VARIATIONS_VIEW = "all_primary_track_variations"
ALL_TRACK_VARIATIONS_VIEW = "all_track_variations"
# key: [lower cased artist names..., lower cased album title, lower cased track title]
ALL_TRACK_KEYS_VIEW = "all_track_keys"

# sorts after any string a key component can hold
HIGHEST_KEY_COMPONENT = "\uffff"


class TracksDBClient(DocumentClient[TrackDocument]):

    database = couchdb.TRACKS_DATABASE
    document_type = TrackDocument

    def retrieve_primary_track_variation_amount(self) -> int:
        return self.retrieve_size(self.view_url(ALL_PRIMARY_TRACK_VARIATIONS_VIEW))

    def retrieve_track_by_id(self, track_id: str) -> Optional[TrackDocument]:
        return self.retrieve(track_id)

    def retrieve_tracks_by_name(self, title: str) -> list[TrackDocument]:
        return self.retrieve_by_key(self.view_url(ALL_TRACK_VARIATIONS_VIEW), lower_case(title))

    def retrieve_tracks_by_key(self, key: list[str]) -> list[TrackDocument]:
        return self.retrieve_by_key(self.view_url(ALL_TRACK_KEYS_VIEW), key)

    def retrieve_tracks_by_incomplete_key(self, key: list[str]) -> list[TrackDocument]:
        """ Retrieve all tracks whose key starts with the given components,
        e.g. all tracks of an album when given the artists and the album title.
        """
        args = ViewQueryArguments() \
            .add_start_key(key) \
            .add_end_key(key + [HIGHEST_KEY_COMPONENT]) \
            .add_include_docs(True)
        return view_query_executor.query_documents(self.view_url(ALL_TRACK_KEYS_VIEW), args, TrackDocument)

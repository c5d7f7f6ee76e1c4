from typing import Optional

from gravifon.db import couchdb
from gravifon.db.document_client import DocumentClient
from gravifon.db.model.album import AlbumDocument
from gravifon.utils import lower_case

ALL_PRIMARY_ALBUM_VARIATIONS_VIEW = "all_primary_album_variations"
ALL_ALBUM_NAMES_VIEW = "all_album_names"
# key: [lower cased artist names..., lower cased album title]
ALL_ALBUM_KEYS_VIEW = "all_album_keys"


class AlbumsDBClient(DocumentClient[AlbumDocument]):

    database = couchdb.ALBUMS_DATABASE
    document_type = AlbumDocument

    def retrieve_primary_album_variation_amount(self) -> int:
        return self.retrieve_size(self.view_url(ALL_PRIMARY_ALBUM_VARIATIONS_VIEW))

    def retrieve_album_by_id(self, album_id: str) -> Optional[AlbumDocument]:
        return self.retrieve(album_id)

    def retrieve_albums_by_name(self, name: str) -> list[AlbumDocument]:
        return self.retrieve_by_key(self.view_url(ALL_ALBUM_NAMES_VIEW), lower_case(name))

    def retrieve_albums_by_key(self, key: list[str]) -> list[AlbumDocument]:
        return self.retrieve_by_key(self.view_url(ALL_ALBUM_KEYS_VIEW), key)

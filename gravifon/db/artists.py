from typing import Optional

from gravifon.db import couchdb
from gravifon.db.document_client import DocumentClient
from gravifon.db.model.artist import ArtistDocument
from gravifon.utils import lower_case

ALL_PRIMARY_ARTIST_VARIATIONS_VIEW = "all_primary_artist_variations"
ALL_ARTIST_VARIATIONS_VIEW = "all_artist_variations"


class ArtistsDBClient(DocumentClient[ArtistDocument]):

    database = couchdb.ARTISTS_DATABASE
    document_type = ArtistDocument

    def retrieve_primary_artist_variation_amount(self) -> int:
        return self.retrieve_size(self.view_url(ALL_PRIMARY_ARTIST_VARIATIONS_VIEW))

    def retrieve_artist_by_id(self, artist_id: str) -> Optional[ArtistDocument]:
        return self.retrieve(artist_id)

    def retrieve_artists_by_name(self, name: str) -> list[ArtistDocument]:
        return self.retrieve_by_key(self.view_url(ALL_ARTIST_VARIATIONS_VIEW), lower_case(name))

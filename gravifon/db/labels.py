from typing import Optional

from gravifon.db import couchdb
from gravifon.db.document_client import DocumentClient
from gravifon.db.model.label import LabelDocument
from gravifon.utils import lower_case

ALL_PRIMARY_LABEL_VARIATIONS_VIEW = "all_primary_label_variations"
ALL_LABEL_VARIATIONS_VIEW = "all_label_variations"


class LabelsDBClient(DocumentClient[LabelDocument]):

    database = couchdb.LABELS_DATABASE
    document_type = LabelDocument

    def retrieve_primary_label_variation_amount(self) -> int:
        return self.retrieve_size(self.view_url(ALL_PRIMARY_LABEL_VARIATIONS_VIEW))

    def retrieve_label_by_id(self, label_id: str) -> Optional[LabelDocument]:
        return self.retrieve(label_id)

    def retrieve_labels_by_name(self, name: str) -> list[LabelDocument]:
        return self.retrieve_by_key(self.view_url(ALL_LABEL_VARIATIONS_VIEW), lower_case(name))

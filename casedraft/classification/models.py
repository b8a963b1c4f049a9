from enum import Enum


class DocumentCategory(str, Enum):
    DIPLOMA = "diploma"
    TRANSCRIPT = "transcript"
    RECOMMENDATION_LETTER = "recommendation_letter"
    AWARD = "award"
    PUBLICATION = "publication"
    CERTIFICATE = "certificate"
    GENERIC = "generic"

    @property
    def is_credential(self) -> bool:
        return self in (DocumentCategory.DIPLOMA, DocumentCategory.TRANSCRIPT)

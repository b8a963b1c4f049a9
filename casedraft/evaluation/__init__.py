from casedraft.evaluation.equivalency import EquivalencyReasoner
from casedraft.evaluation.factory import GenerationClientFactory
from casedraft.evaluation.field_extractor import StructuredFieldExtractor
from casedraft.evaluation.models import CourseRecord, StructuredCredentialRecord

__all__ = [
    "CourseRecord",
    "EquivalencyReasoner",
    "GenerationClientFactory",
    "StructuredCredentialRecord",
    "StructuredFieldExtractor",
]

from casedraft.letters.drafting import DraftedLetter, LetterDraftingService
from casedraft.letters.prompt_composer import EvidencePromptComposer
from casedraft.letters.sample_letters import SampleLetterRepository, normalize_visa_type

__all__ = [
    "DraftedLetter",
    "EvidencePromptComposer",
    "LetterDraftingService",
    "SampleLetterRepository",
    "normalize_visa_type",
]

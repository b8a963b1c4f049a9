"""Read-only corpus of exemplar letters and best-match selection."""

import json
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from casedraft.logging.logger import Log
from casedraft.letters.exceptions import CorpusLoadError

DEFAULT_CORPUS_PATH = Path(__file__).parent / "data" / "sample_letters.json"

# Longest variants first so "EB-1A" and "H-1B1" resolve by prefix.
_VISA_PREFIXES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("EB-1", "EB1"), "EB1"),
    (("EB-2", "EB2"), "EB2"),
    (("EB-3", "EB3"), "EB3"),
    (("O-1", "O1"), "O1"),
    (("L-1", "L1"), "L1"),
    (("H-1B", "H1B"), "H1B"),
    (("P-1", "P1"), "P1"),
    (("P-3", "P3"), "P3"),
)
_VISA_FAMILIES = ("EB", "O", "L", "H")


def normalize_visa_type(visa_type: str | None) -> str:
    """Map surface variants (``eb-1a``, ``EB1``, ``O-1``) to a canonical code.

    Unrecognised types are returned unchanged.
    """
    if not visa_type:
        return ""
    upper = visa_type.strip().upper()
    for prefixes, canonical in _VISA_PREFIXES:
        if upper.startswith(prefixes):
            return canonical
    return visa_type


def visa_family(visa_type: str) -> str | None:
    normalized = normalize_visa_type(visa_type).upper()
    for family in _VISA_FAMILIES:
        if normalized.startswith(family):
            return family
    return None


@dataclass(frozen=True)
class SampleLetter:
    id: str
    visa_type: str
    tags: frozenset[str]
    body: str
    title: str = ""

    def tag_score(self, tags: Iterable[str]) -> int:
        """One point per distinct requested tag the sample carries."""
        return len(self.tags & {t.strip().lower() for t in tags if t})


class SampleLetterRepository:
    """Holds the sample-letter corpus in its original order.

    Load once at startup and pass the instance to whoever needs it; corpus
    order acts as the default priority ranking.
    """

    def __init__(self, samples: Iterable[SampleLetter]) -> None:
        self._samples: tuple[SampleLetter, ...] = tuple(samples)

    @classmethod
    def from_json(cls, path: Path | str | None = None) -> "SampleLetterRepository":
        corpus_path = Path(path) if path else DEFAULT_CORPUS_PATH
        try:
            raw = json.loads(corpus_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise CorpusLoadError(f"Failed to load sample letters from {corpus_path}: {exc}") from exc
        if not isinstance(raw, list):
            raise CorpusLoadError(f"Sample letter corpus must be a JSON array: {corpus_path}")

        samples = [cls._build_sample(item, index) for index, item in enumerate(raw)]
        Log.info(f"Loaded {len(samples)} sample letters from {corpus_path}")
        return cls(samples)

    @staticmethod
    def _build_sample(item: object, index: int) -> SampleLetter:
        if not isinstance(item, dict):
            raise CorpusLoadError(f"Sample letter at index {index} must be an object")
        body = item.get("body") or item.get("content")
        visa_type = item.get("visaType") or item.get("visa_type")
        if not isinstance(body, str) or not isinstance(visa_type, str):
            raise CorpusLoadError(f"Sample letter at index {index} needs a visa type and a body")
        tags = item.get("tags") or []
        return SampleLetter(
            id=str(item.get("id") or f"sample-{index + 1}"),
            visa_type=visa_type,
            tags=frozenset(str(t).lower() for t in tags),
            body=body,
            title=str(item.get("title") or ""),
        )

    def __len__(self) -> int:
        return len(self._samples)

    def all(self) -> list[SampleLetter]:
        return list(self._samples)

    def get_by_id(self, sample_id: str) -> SampleLetter | None:
        return next((s for s in self._samples if s.id == sample_id), None)

    def samples_by_visa_type(self, visa_type: str) -> list[SampleLetter]:
        normalized = normalize_visa_type(visa_type)
        return [s for s in self._samples if normalize_visa_type(s.visa_type) == normalized]

    def candidates(self, visa_type: str) -> list[SampleLetter]:
        """Exact visa matches, else every sample of the same visa family."""
        samples = self.samples_by_visa_type(visa_type)
        if samples:
            return samples
        family = visa_family(visa_type)
        if family is None:
            return []
        Log.warning(f"No exact sample letters for {visa_type}; falling back to {family} family")
        return [s for s in self._samples if visa_family(s.visa_type) == family]

    def select_sample(self, visa_type: str, tags: Iterable[str] = ()) -> SampleLetter | None:
        """Best sample for the visa type by tag overlap. Ties keep corpus order."""
        candidates = self.candidates(visa_type)
        if not candidates:
            Log.warning(f"No sample letters available for visa type: {visa_type}")
            return None
        tags = list(tags)
        if not tags:
            return candidates[0]
        # max() returns the first maximal element.
        return max(candidates, key=lambda sample: sample.tag_score(tags))

import io

import pytesseract
from PIL import Image

from casedraft.extraction.exceptions import ExtractionError


class OcrReader:
    """Image OCR with Tesseract at word/line granularity.

    Confidence is the mean word confidence (0-100) and is informational only.
    """

    def __init__(self, languages: str = "eng", tesseract_cmd: str = "") -> None:
        self._languages = languages
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd

    def read(self, image_bytes: bytes) -> tuple[str, float, int]:
        """Return (text, mean_confidence, word_count).

        Raises:
            ExtractionError: if the image cannot be decoded or Tesseract fails.
        """
        try:
            image = Image.open(io.BytesIO(image_bytes))
            data = pytesseract.image_to_data(
                image,
                lang=self._languages,
                output_type=pytesseract.Output.DICT,
            )
        except Exception as exc:
            raise ExtractionError(f"OCR failed: {exc}") from exc

        lines: dict[tuple[int, int, int], list[str]] = {}
        confidences: list[float] = []
        for i, word in enumerate(data.get("text", [])):
            word = (word or "").strip()
            if not word:
                continue
            key = (data["block_num"][i], data["par_num"][i], data["line_num"][i])
            lines.setdefault(key, []).append(word)
            conf = float(data["conf"][i])
            if conf >= 0:
                confidences.append(conf)

        text = "\n".join(" ".join(words) for _, words in sorted(lines.items()))
        confidence = sum(confidences) / len(confidences) if confidences else 0.0
        return text, round(confidence, 2), len(confidences)

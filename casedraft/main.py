"""Command-line entry point: ``casedraft <command> ...``."""

import argparse
import json
import sys
from dataclasses import asdict, is_dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from casedraft.config.settings import Settings
from casedraft.database.connection import close_pool, init_pool
from casedraft.database.repositories.record_repository import RecordRepository
from casedraft.evaluation.equivalency import EquivalencyReasoner
from casedraft.evaluation.factory import GenerationClientFactory
from casedraft.evaluation.field_extractor import StructuredFieldExtractor
from casedraft.extraction.text_extractor import build_text_extractor
from casedraft.letters.drafting import LetterDraftingService
from casedraft.letters.evidence import expert_evidence_from_dict, petition_evidence_from_dict
from casedraft.letters.prompt_composer import EvidencePromptComposer
from casedraft.letters.sample_letters import SampleLetterRepository
from casedraft.logging.logger import Log
from casedraft.results import ErrorKind, Result
from casedraft.services.document_analysis_service import DocumentAnalysisService
from casedraft.services.evaluation_letter_service import EvaluationLetterService
from casedraft.services.evaluation_service import CredentialEvaluationService
from casedraft.services.translation_service import TranslationService
from casedraft.storage.blob_store import JsonBlobStore
from casedraft.storage.file_collections import TranslationFileRepository
from casedraft.storage.file_loader import FileLoader
from casedraft.verification.service import DocumentVerificationService


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="casedraft",
        description="Evidence processing and letter drafting for immigration cases",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    evaluate = sub.add_parser("evaluate", help="Evaluate a diploma or transcript for US equivalency")
    evaluate.add_argument("path", type=Path)
    evaluate.add_argument("--type", default="", help="Declared file type, e.g. pdf or image/png")

    verify = sub.add_parser("verify", help="Heuristic authenticity check of a document")
    verify.add_argument("path", type=Path)
    verify.add_argument("--type", default="")

    translate = sub.add_parser("translate", help="OCR and translate a document")
    translate.add_argument("path", type=Path)
    translate.add_argument("--to", dest="language_to", required=True)
    translate.add_argument("--from", dest="language_from", default=None)
    translate.add_argument("--type", default="")

    draft = sub.add_parser("draft-letter", help="Draft an expert or petition letter")
    draft.add_argument("--visa-type", required=True)
    draft.add_argument("--kind", choices=("expert", "petition"), default="expert")
    draft.add_argument("--evidence", type=Path, help="JSON file with applicant, expert and achievements")
    draft.add_argument("--tags", default="", help="Comma-separated sample tags")
    draft.add_argument("--multi-sample", action="store_true")
    draft.add_argument("--case-id", default=None, help="Store the draft in the letters table")

    analyze = sub.add_parser("analyze-case", help="Re-analyse every document of a case")
    analyze.add_argument("case_id")

    letter = sub.add_parser("evaluation-letter", help="Extract data for and render an evaluation letter")
    letter.add_argument("evaluation_letter_id")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point: parse arguments -> build dependencies -> run one command."""
    args = build_parser().parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)

    uses_database = args.command in ("analyze-case", "evaluation-letter") or (
        args.command == "draft-letter" and args.case_id
    )
    if uses_database:
        init_pool(settings)
    try:
        result = _run(args, settings)
    finally:
        if uses_database:
            close_pool()

    _emit(result)
    return 0 if result.ok or result.value is not None else 1


def _run(args: argparse.Namespace, settings: Settings) -> Result[Any]:
    client = GenerationClientFactory.create(settings)
    text_extractor = build_text_extractor(settings)

    if args.command == "evaluate":
        service = CredentialEvaluationService(
            text_extractor=text_extractor,
            field_extractor=StructuredFieldExtractor(client=client, max_source_chars=settings.max_source_chars),
            reasoner=EquivalencyReasoner(client=client, max_source_chars=settings.max_source_chars),
        )
        return service.evaluate_document(args.path.read_bytes(), args.path.name, args.type)

    if args.command == "verify":
        verifier = DocumentVerificationService(
            text_extractor=text_extractor,
            client=client,
            timeout_seconds=settings.verification_timeout_seconds,
            narrative=settings.verification_narrative,
        )
        return verifier.verify_document(args.path.read_bytes(), args.path.name, args.type)

    if args.command == "translate":
        translator = TranslationService(
            text_extractor=text_extractor,
            client=client,
            files=TranslationFileRepository(JsonBlobStore(settings.local_store_dir)),
        )
        uploaded = translator.upload_document(args.path.read_bytes(), args.path.name, args.type)
        if uploaded.value is None:
            return uploaded
        return translator.translate(uploaded.value.id, args.language_to, args.language_from)

    if args.command == "draft-letter":
        samples = SampleLetterRepository.from_json(settings.sample_letters_path or None)
        drafting = LetterDraftingService(
            composer=EvidencePromptComposer(samples),
            client=client,
            repository=RecordRepository() if args.case_id else None,
        )
        raw = json.loads(args.evidence.read_text(encoding="utf-8")) if args.evidence else {}
        tags = [tag.strip() for tag in args.tags.split(",") if tag.strip()]
        if args.kind == "petition":
            return drafting.draft_petition_letter(
                args.visa_type, petition_evidence_from_dict(raw), tags, case_id=args.case_id
            )
        return drafting.draft_expert_letter(
            args.visa_type,
            expert_evidence_from_dict(raw),
            tags,
            multi_sample=args.multi_sample,
            case_id=args.case_id,
        )

    repository = RecordRepository()
    if args.command == "analyze-case":
        analysis = DocumentAnalysisService(
            repository=repository,
            file_loader=FileLoader(settings.files_root),
            text_extractor=text_extractor,
            client=client,
            max_source_chars=settings.max_source_chars,
        )
        results = analysis.reprocess_case(args.case_id)
        failed = [r for r in results if not r.ok]
        summary = [_to_jsonable(r.value) if r.ok else {"error": r.error} for r in results]
        if failed:
            return Result.failure(
                failed[0].error_kind or ErrorKind.EXTRACTION,
                f"{len(failed)} of {len(results)} documents failed",
                value=summary,
            )
        return Result.success(summary)

    letters = EvaluationLetterService(repository=repository, client=client)
    extracted = letters.extract_data(args.evaluation_letter_id)
    if not extracted.ok:
        return extracted
    return letters.render_letter(args.evaluation_letter_id)


def _emit(result: Result[Any]) -> None:
    payload: dict[str, Any] = {"ok": result.ok, "degraded": result.degraded}
    if result.value is not None:
        payload["value"] = _to_jsonable(result.value)
    if not result.ok:
        payload["error_kind"] = result.error_kind.value if result.error_kind else None
        payload["error"] = result.error
    json.dump(payload, sys.stdout, indent=2, ensure_ascii=False, default=str)
    sys.stdout.write("\n")


def _to_jsonable(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return _to_jsonable(asdict(value))
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {str(k): _to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_to_jsonable(v) for v in value]
    return value


if __name__ == "__main__":
    sys.exit(main())

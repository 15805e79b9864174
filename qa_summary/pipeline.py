"""Summary pipeline entry point: ingest, chunk, index, retrieve, orchestrate, guard, persist."""

from __future__ import annotations

import argparse
import asyncio
import base64
import hashlib
import logging
import sys
import time
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Optional

from qa_summary.config import settings
from qa_summary.ingestion.chunking import build_chunk_config, chunk_document
from qa_summary.ingestion.normalize import normalize_document
from qa_summary.models.api import (
    Diagnostic,
    DocumentPayload,
    SummaryMetrics,
    SummaryRequest,
    SummaryResponse,
)
from qa_summary.models.document import Document
from qa_summary.models.mode import Mode, RawMode
from qa_summary.models.summary import GuardrailReport, Orchestration, SummaryRecord
from qa_summary.retrieval.lexical_index import build_search_index
from qa_summary.retrieval.lexical_retriever import LexicalRetriever
from qa_summary.retrieval.query_builder import build_mode, build_query
from qa_summary.storage.summary_store import SummaryRepository, build_repository
from qa_summary.summary.guardrails import calculate_confidence, run_guardrails
from qa_summary.summary.orchestrator import run_orchestration
from qa_summary.summary.profiles import detail_plan

logger = logging.getLogger(__name__)


def generate_request_id() -> str:
    return f"req_{uuid.uuid4().hex[:12]}"


def generate_summary_id() -> str:
    return f"sum_{uuid.uuid4().hex[:16]}"


def compute_prompt_hash(doc_id: str, mode: Mode) -> str:
    return hashlib.sha256(f"{doc_id}:{mode.role.value}:{mode.lens.value}".encode("utf-8")).hexdigest()


class DiagnosticsLog:
    """Ordered stage events, mirrored to the module logger at DEBUG."""

    def __init__(self) -> None:
        self.events: List[Diagnostic] = []

    def emit(self, stage: str, message: str, **metadata: Any) -> None:
        self.events.append(Diagnostic(stage=stage, message=message, metadata=metadata))
        logger.debug("[%s] %s %s", stage, message, metadata)


class SummaryPipeline:
    """Runs one summarization request end to end.

    Every stage before persistence is synchronous and in-memory; only the
    repository touches I/O. Any exception raised before the ``persist`` stage
    propagates and nothing is stored.
    """

    def __init__(self, repository: SummaryRepository | None = None) -> None:
        self.repository = repository or build_repository()

    async def run(self, request: SummaryRequest, request_id: Optional[str] = None) -> SummaryResponse:
        request_id = request_id or generate_request_id()
        diagnostics = DiagnosticsLog()
        started_at = time.perf_counter()

        document, warnings = normalize_document(request.document)
        diagnostics.emit("ingest", "Document normalized", docId=document.doc_id, warnings=warnings)

        chunk_config = build_chunk_config(request.chunkConfig)
        chunks = chunk_document(document, chunk_config)
        diagnostics.emit("preprocess", "Chunks generated", chunkCount=len(chunks))

        index = build_search_index(chunks)
        diagnostics.emit("index", "Index prepared", tokenCount=index.total_tokens)

        mode = build_mode(request.mode)
        plan = detail_plan(mode.detail)
        query = build_query(request.query, mode, request.filters)
        retrieved = LexicalRetriever(index).retrieve(query, plan.max_chunks)
        diagnostics.emit("retrieve", "Chunks retrieved", retrieved=len(retrieved))

        orchestration = run_orchestration(retrieved, mode, plan)
        diagnostics.emit("orchestrate", "Summary generated", sentenceCount=len(orchestration.sentences))

        guardrails = run_guardrails(orchestration.summary_text, orchestration.citations, mode)
        diagnostics.emit("guardrails", "Guardrails evaluated", **guardrails.model_dump(mode="json", by_alias=True))

        record = await self.persist(document, mode, orchestration, guardrails, request_id, request.summary_id)
        diagnostics.emit("persist", "Summary persisted", summaryId=record.summary_id)

        metrics = SummaryMetrics(
            latency_ms=int((time.perf_counter() - started_at) * 1000),
            chunk_count=len(chunks),
            retrieved_count=len(retrieved),
            citation_density=len(orchestration.citations) / max(1, len(orchestration.sentences)),
            confidence=record.confidence,
        )
        logger.info(
            "Summarized %s as %s (%s chunks, confidence %.2f, %s violations)",
            document.doc_id,
            record.summary_id,
            len(chunks),
            record.confidence,
            len(guardrails.violations),
        )
        return SummaryResponse(summary=record, diagnostics=diagnostics.events, metrics=metrics)

    async def persist(
        self,
        document: Document,
        mode: Mode,
        orchestration: Orchestration,
        guardrails: GuardrailReport,
        request_id: str,
        summary_id: Optional[str] = None,
    ) -> SummaryRecord:
        record = SummaryRecord(
            summary_id=summary_id or generate_summary_id(),
            doc_id=document.doc_id,
            title=document.title,
            mode=mode,
            model=settings.summary_model_id,
            prompt_hash=compute_prompt_hash(document.doc_id, mode),
            citations=orchestration.citations,
            confidence=calculate_confidence(orchestration.citations, guardrails.violations),
            created_at=datetime.now(timezone.utc).isoformat(),
            request_id=request_id,
            summary=orchestration.summary_text,
            guardrails=guardrails,
        )
        return await self.repository.save(record)

    async def get_summary(self, summary_id: str) -> Optional[SummaryRecord]:
        return await self.repository.get(summary_id)


def _document_payload(path: Path, title: Optional[str]) -> DocumentPayload:
    if path.suffix.lower() == ".pdf":
        return DocumentPayload(
            content_base64=base64.b64encode(path.read_bytes()).decode("ascii"),
            content_type="application/pdf",
            title=title or path.stem,
        )
    return DocumentPayload(content=path.read_text(encoding="utf-8"), title=title or path.stem)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Summarize a local QA document.")
    parser.add_argument("path", type=Path, help="Text, markdown or PDF file to summarize.")
    parser.add_argument("--title")
    parser.add_argument("--role")
    parser.add_argument("--lens")
    parser.add_argument("--detail")
    parser.add_argument("--query", default="")
    return parser.parse_args(argv)


async def summarize_file(args: argparse.Namespace) -> SummaryResponse:
    pipeline = SummaryPipeline()
    request = SummaryRequest(
        document=_document_payload(args.path, args.title),
        mode=RawMode(role=args.role, lens=args.lens, detail=args.detail),
        query=args.query,
    )
    try:
        return await pipeline.run(request)
    finally:
        if pipeline.repository.store is not None:
            await pipeline.repository.store.dispose()


def main(argv: Optional[List[str]] = None) -> None:
    logging.basicConfig(level=settings.log_level)
    args = parse_args(argv)
    if not args.path.exists():
        logger.error("Document %s does not exist", args.path)
        sys.exit(1)
    response = asyncio.run(summarize_file(args))
    print(response.model_dump_json(by_alias=True, indent=2))


if __name__ == "__main__":
    main()

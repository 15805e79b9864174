"""FastAPI application entry point."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Header, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from qa_summary.config import settings
from qa_summary.models.api import SummaryLookupResponse, SummaryRequest, SummaryResponse
from qa_summary.pipeline import SummaryPipeline

logger = logging.getLogger(__name__)


def create_app(pipeline: SummaryPipeline | None = None) -> FastAPI:
    app = FastAPI(
        title="QA Summary Pipeline",
        description="Role-aware extractive summaries of pharmaceutical QA documents",
        version="0.1.0",
    )
    app.state.pipeline = pipeline or SummaryPipeline()

    @app.exception_handler(RequestValidationError)
    async def invalid_payload(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.warning("Rejected summary payload: %s", exc.errors())
        return JSONResponse(status_code=400, content={"error": "Invalid JSON payload"})

    @app.get("/health")
    def health() -> dict[str, str]:
        """Simple readiness probe."""
        return {"status": "ok"}

    @app.post("/summaries", status_code=202, response_model=SummaryResponse)
    async def create_summary(
        payload: SummaryRequest,
        x_request_id: Optional[str] = Header(default=None),
    ):
        """Run the summary pipeline for one document."""
        try:
            return await app.state.pipeline.run(payload, request_id=x_request_id)
        except Exception as exc:
            logger.exception("summary-pipeline error")
            return JSONResponse(
                status_code=500,
                content={"error": "Internal server error", "message": str(exc)},
            )

    @app.get("/summaries", response_model=SummaryLookupResponse)
    async def get_summary(
        summary_id: Optional[str] = None,
        id: Optional[str] = None,
        summaryId: Optional[str] = None,
    ):
        """Look up a persisted summary by id."""
        lookup_id = summary_id or id or summaryId
        if not lookup_id:
            return JSONResponse(
                status_code=400,
                content={"error": "summary_id query parameter is required"},
            )
        record = await app.state.pipeline.get_summary(lookup_id)
        if record is None:
            return JSONResponse(status_code=404, content={"error": "Summary not found"})
        return SummaryLookupResponse(summary=record)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=settings.log_level)
    uvicorn.run("qa_summary.api.main:app", host="0.0.0.0", port=8000)

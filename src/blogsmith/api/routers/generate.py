from __future__ import annotations

import logging
from contextlib import closing
from typing import Iterator

import requests
from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from ...config import get_settings
from ...domain.blog_models import ErrorResponse, GenerationRequest
from ...errors import GenerationError
from ...observability.metrics import FRAGMENTS_RELAYED, FRAMES_SKIPPED, GENERATION_FAILURES
from ...services.prompt_builder import build_prompt
from ...services.stream_decoder import StreamDecoder
from ...services.upstream import ChatCompletionClient, stream_fragments

LOG = logging.getLogger("blogsmith.relay")

NOT_CONFIGURED_MESSAGE = "Deepseek API key is not configured"
GENERATION_FAILED_MESSAGE = "Failed to generate blog post"

router = APIRouter(tags=["generate"])


def _error_response(message: str, reason: str) -> JSONResponse:
    GENERATION_FAILURES.labels(reason=reason).inc()
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(error=message).model_dump(),
    )


def relay_stream(resp: requests.Response) -> Iterator[bytes]:
    """Forward each decoded fragment as soon as it is decoded.

    A read error mid-stream is logged and re-raised so the outgoing response
    is aborted instead of ending cleanly.
    """
    decoder = StreamDecoder()
    with closing(stream_fragments(resp, decoder)) as fragments:
        try:
            for fragment in fragments:
                FRAGMENTS_RELAYED.inc()
                yield fragment.encode("utf-8")
        except Exception as exc:
            GENERATION_FAILURES.labels(reason="stream").inc()
            LOG.error(
                "relay_stream_aborted",
                extra={"err": str(exc), "fragments": decoder.fragments_emitted},
            )
            raise
        finally:
            if decoder.frames_skipped:
                FRAMES_SKIPPED.inc(decoder.frames_skipped)


@router.post(
    "/generate",
    response_class=StreamingResponse,
    responses={500: {"model": ErrorResponse}},
)
async def generate_blog_post(request: Request):
    try:
        payload = GenerationRequest.model_validate(await request.json())
    except (ValueError, ValidationError) as exc:
        LOG.error("generation_request_invalid", extra={"err": str(exc)})
        return _error_response(GENERATION_FAILED_MESSAGE, "request")

    settings = get_settings()
    if not settings.has_api_key:
        LOG.error("generation_not_configured", extra={"missing": "DEEPSEEK_API_KEY"})
        return _error_response(NOT_CONFIGURED_MESSAGE, "configuration")

    try:
        prompt = build_prompt(payload.title, payload.keywords, payload.perspective)
    except ValueError as exc:
        LOG.error("generation_perspective_unknown", extra={"perspective": payload.perspective, "err": str(exc)})
        return _error_response(GENERATION_FAILED_MESSAGE, "request")

    client = ChatCompletionClient(settings)
    try:
        resp = await run_in_threadpool(client.open_stream, prompt)
    except GenerationError as exc:
        LOG.error("generation_upstream_failed", extra={"err": str(exc)})
        return _error_response(GENERATION_FAILED_MESSAGE, "upstream")

    LOG.info(
        "generation_started",
        extra={"model": settings.model, "perspective": payload.perspective or "", "keywords": len(payload.keywords or [])},
    )
    headers = {
        "Cache-Control": "no-cache, no-transform",
        "X-Accel-Buffering": "no",
    }
    return StreamingResponse(relay_stream(resp), media_type="text/plain; charset=utf-8", headers=headers)

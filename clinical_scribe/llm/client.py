import asyncio
from datetime import datetime, timezone
import json
import logging
from pathlib import Path
import time
from threading import Lock
from uuid import uuid4

from openai import (
    APIConnectionError,
    APITimeoutError,
    AsyncOpenAI,
    InternalServerError,
    NotFoundError,
    RateLimitError,
)

from clinical_scribe.config import settings

_client: AsyncOpenAI | None = None
_semaphore: asyncio.Semaphore | None = None
logger = logging.getLogger(__name__)
_log_write_lock = Lock()

TRANSIENT_LLM_ERRORS = (
    APIConnectionError,
    APITimeoutError,
    InternalServerError,
    RateLimitError,
)


def get_semaphore() -> asyncio.Semaphore:
    """Lazy-init semaphore for concurrent LLM call control."""
    global _semaphore
    if _semaphore is None:
        _semaphore = asyncio.Semaphore(settings.llm_max_concurrent_calls)
    return _semaphore


def _llm_log_path() -> Path:
    log_path = Path(settings.llm_log_path)
    if log_path.is_absolute():
        return log_path
    project_root = Path(__file__).resolve().parents[2]
    return project_root / log_path


def _append_llm_log(record: dict) -> None:
    if not settings.llm_log_enabled:
        return

    path = _llm_log_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        line = json.dumps(record, ensure_ascii=False)
        with _log_write_lock:
            with path.open("a", encoding="utf-8") as f:
                f.write(line + "\n")
    except OSError:
        logger.exception("Failed to write LLM request log.")


def get_client() -> AsyncOpenAI:
    global _client
    if _client is None:
        _client = AsyncOpenAI(
            base_url=settings.llm_base_url,
            api_key=settings.llm_api_key,
            timeout=settings.llm_request_timeout_seconds,
            max_retries=0,
        )
    return _client


async def chat_completion(
    system_prompt: str,
    user_prompt: str,
    max_tokens: int | None = None,
    temperature: float | None = None,
    call_type: str = "unspecified",
) -> str:
    """Send a chat completion request to the configured OpenAI-compatible server."""
    client = get_client()
    retries = max(0, settings.llm_max_retries)
    last_error: Exception | None = None
    resolved_max_tokens = max_tokens or settings.llm_max_tokens
    resolved_temperature = temperature if temperature is not None else settings.llm_temperature
    call_id = str(uuid4())
    call_started_at = datetime.now(timezone.utc).isoformat()

    def log_attempt(
        attempt: int,
        started: float,
        output: str | None,
        error: Exception | None = None,
    ) -> None:
        _append_llm_log(
            {
                "ts_utc": datetime.now(timezone.utc).isoformat(),
                "call_started_at_utc": call_started_at,
                "call_id": call_id,
                "call_type": call_type,
                "attempt": attempt + 1,
                "max_attempts": retries + 1,
                "base_url": settings.llm_base_url,
                "model": settings.llm_model,
                "max_tokens": resolved_max_tokens,
                "temperature": resolved_temperature,
                "system_prompt": system_prompt,
                "user_prompt": user_prompt,
                "output": output,
                "latency_ms": int((time.perf_counter() - started) * 1000),
                "success": error is None,
                "error_type": error.__class__.__name__ if error else None,
                "error_message": str(error) if error else None,
            }
        )

    async with get_semaphore():
        for attempt in range(retries + 1):
            request_started = time.perf_counter()
            try:
                response = await client.chat.completions.create(
                    model=settings.llm_model,
                    messages=[
                        {"role": "system", "content": system_prompt},
                        {"role": "user", "content": user_prompt},
                    ],
                    max_tokens=resolved_max_tokens,
                    temperature=resolved_temperature,
                )
                output = response.choices[0].message.content or ""
                log_attempt(attempt, request_started, output)
                return output
            except NotFoundError as exc:
                log_attempt(attempt, request_started, None, exc)
                base = settings.llm_base_url.rstrip("/")
                raise RuntimeError(
                    f"LLM endpoint not found (404) at {base}/chat/completions. "
                    "Check SCRIBE_LLM_BASE_URL or disable the LLM with SCRIBE_LLM_ENABLED=false."
                ) from exc
            except TRANSIENT_LLM_ERRORS as exc:
                log_attempt(attempt, request_started, None, exc)
                last_error = exc
                if attempt >= retries:
                    break
                backoff = settings.llm_retry_backoff_seconds * (2**attempt)
                logger.warning(
                    "LLM request failed (%s). retry %s/%s in %.2fs",
                    exc.__class__.__name__,
                    attempt + 1,
                    retries + 1,
                    backoff,
                )
                await asyncio.sleep(backoff)

    assert last_error is not None
    raise last_error

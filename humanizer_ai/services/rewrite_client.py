from __future__ import annotations

import json
import re
from typing import Any

import httpx
from pydantic import ValidationError

from humanizer_ai.core.config import Settings, get_settings
from humanizer_ai.core.errors import InputTooLongError, RewriteError
from humanizer_ai.core.logging import get_logger
from humanizer_ai.schemas.humanize import CHANGE_TYPES, HumanizationResult, RewriteOptions
from humanizer_ai.services.fallback import FallbackRewriter

logger = get_logger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?\s*\n(.*?)```", flags=re.S | re.I)

TONE_GUIDANCE = {
    "professional": "polished and businesslike, but never stiff",
    "casual": "relaxed and conversational, like talking to a friend",
    "academic": "precise and scholarly, while still reading like a person wrote it",
    "friendly": "warm, approachable and upbeat",
    "confident": "direct and assured, with no hedging",
    "researcher": "careful and evidence-minded, like a researcher explaining their findings",
}

VOICE_GUIDANCE = {
    "first-person": "Write in the first person (I/we).",
    "third-person": "Write in the third person.",
    "objective": "Keep an objective, impersonal voice.",
}

SYSTEM_PROMPT = (
    "You rewrite AI-generated text so it reads as if a person wrote it. Keep the meaning, facts and "
    "structure (including line breaks). Report every localized edit you make. Allowed change types: "
    + ", ".join(CHANGE_TYPES)
    + ". For each change give the original snippet, the exact replacement snippet as it appears in "
    "your rewritten text, and a one-sentence explanation. Also report summary counts."
)

RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "text": {"type": "STRING"},
        "changes": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "type": {"type": "STRING", "enum": list(CHANGE_TYPES)},
                    "originalText": {"type": "STRING"},
                    "humanizedText": {"type": "STRING"},
                    "explanation": {"type": "STRING"},
                },
                "required": ["type", "originalText", "humanizedText", "explanation"],
            },
        },
        "stats": {
            "type": "OBJECT",
            "properties": {
                "totalChanges": {"type": "INTEGER"},
                "phrasesReplaced": {"type": "INTEGER"},
                "contractionsAdded": {"type": "INTEGER"},
            },
            "required": ["totalChanges", "phrasesReplaced", "contractionsAdded"],
        },
    },
    "required": ["text", "changes", "stats"],
}


def build_prompt(text: str, options: RewriteOptions) -> str:
    lines = [
        f"Tone: {TONE_GUIDANCE[options.tone]}.",
        VOICE_GUIDANCE[options.voice],
    ]
    if options.expand:
        lines.append(
            "Expand the text: add natural elaboration, examples or transitions where they help. "
            "Report each addition as an EXPAND change."
        )
    else:
        lines.append("Keep roughly the original length.")
    lines.append("")
    lines.append("Text to rewrite:")
    lines.append(text)
    return "\n".join(lines)


def _extract_payload(body: Any) -> dict:
    if not isinstance(body, dict):
        raise RewriteError("The rewrite service returned an unexpected response.")

    feedback = body.get("promptFeedback")
    if isinstance(feedback, dict) and feedback.get("blockReason"):
        raise RewriteError(f"The rewrite request was blocked ({feedback['blockReason']}).")

    candidates = body.get("candidates")
    if not isinstance(candidates, list) or not candidates or not isinstance(candidates[0], dict):
        raise RewriteError("The rewrite service returned no result.")
    content = candidates[0].get("content")
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list):
        raise RewriteError("The rewrite service returned no result.")

    texts = [part.get("text") for part in parts if isinstance(part, dict)]
    raw = "".join(text for text in texts if isinstance(text, str)).strip()
    fenced = _FENCE_RE.findall(raw)
    if fenced:
        raw = fenced[0].strip()
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise RewriteError("The rewrite service returned an unexpected response.") from exc
    if not isinstance(payload, dict):
        raise RewriteError("The rewrite service returned an unexpected response.")
    return payload


def _error_message(response: httpx.Response) -> str:
    try:
        detail = response.json().get("error", {}).get("message")
    except (ValueError, AttributeError):
        detail = None
    return detail or response.text[:180] or response.reason_phrase


class RewriteClient:
    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.transport = transport
        self.fallback = FallbackRewriter()

    @property
    def mode(self) -> str:
        if self.settings.remote_rewrite_enabled:
            return "remote"
        return "fallback"

    @property
    def endpoint(self) -> str:
        return f"{self.settings.gemini_api_base}/models/{self.settings.gemini_model}:generateContent"

    async def humanize(self, text: str, options: RewriteOptions) -> HumanizationResult:
        if len(text) > self.settings.rewrite_max_input_chars:
            raise InputTooLongError(
                f"Text is too long to rewrite ({len(text)} characters; the limit is "
                f"{self.settings.rewrite_max_input_chars})."
            )

        if self.mode == "fallback":
            if self.settings.rewrite_require_remote:
                raise RewriteError("The rewrite service is not configured (missing GEMINI_API_KEY).")
            logger.info("rewrite_fallback", tone=options.tone, voice=options.voice, chars=len(text))
            return self.fallback.rewrite(text, options)

        return await self._remote_humanize(text, options)

    async def _remote_humanize(self, text: str, options: RewriteOptions) -> HumanizationResult:
        payload = {
            "systemInstruction": {"parts": [{"text": SYSTEM_PROMPT}]},
            "contents": [{"role": "user", "parts": [{"text": build_prompt(text, options)}]}],
            "generationConfig": {
                "temperature": self.settings.gemini_temperature,
                "responseMimeType": "application/json",
                "responseSchema": RESPONSE_SCHEMA,
            },
        }
        headers = {
            "Content-Type": "application/json",
            "x-goog-api-key": self.settings.gemini_api_key,
        }

        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(self.settings.gemini_timeout_seconds),
                transport=self.transport,
            ) as client:
                response = await client.post(self.endpoint, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            logger.exception("rewrite_request_failed", model=self.settings.gemini_model)
            raise RewriteError("Could not reach the rewrite service. Please try again.") from exc

        if response.status_code >= 400:
            message = _error_message(response)
            logger.warning(
                "rewrite_http_error",
                model=self.settings.gemini_model,
                status_code=response.status_code,
                preview=message[:180],
            )
            raise RewriteError(f"Rewrite service error ({response.status_code}): {message}")

        try:
            body = response.json()
        except ValueError as exc:
            raise RewriteError("The rewrite service returned an unexpected response.") from exc

        try:
            result = HumanizationResult.model_validate(_extract_payload(body))
        except ValidationError as exc:
            logger.warning("rewrite_response_invalid", errors=exc.error_count())
            raise RewriteError("The rewrite service returned an unexpected response.") from exc

        logger.info(
            "rewrite_completed",
            model=self.settings.gemini_model,
            changes=len(result.changes),
            chars_in=len(text),
            chars_out=len(result.text),
        )
        return result

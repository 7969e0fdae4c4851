"""Coaching tips from the conversational LLM.

The model is asked for a bare JSON array of 2-3 sentences. Replies are
parsed leniently: first as a whole, then by extracting the first ``[...]``
block from any surrounding prose or Markdown.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Final

from voice_coach.application.interfaces import TipGenerator
from voice_coach.domain.models import TipContext
from voice_coach.services.llm_client import BedrockLlmClient

logger = logging.getLogger(__name__)

MAX_TIPS: Final = 3
TRANSCRIPT_EXCERPT_CHARS: Final = 500

FALLBACK_TIPS: Final[tuple[str, ...]] = (
    "Keep practicing, consistency is the key to confident speaking.",
    "Try recording yourself daily for 5 minutes to track your progress.",
    "Focus on pausing naturally between sentences instead of using filler words.",
)

SYSTEM_PROMPT: Final = """You are BOLI, a warm, encouraging speaking coach for Indian students preparing for job interviews.
Your role is to build confidence, not criticize.
Rules:
- Always acknowledge something positive first
- Give exactly 2-3 tips, each one sentence long
- Never mention "accent" negatively
- Frame everything as skill-building: "try" not "you should"
- Use simple language (8th grade reading level)
- Be specific: reference actual words or scores from the session
- Return ONLY a JSON array of strings. No preamble, no markdown, no explanation.
Example output: ["Great energy in your voice!", "Try pausing for 1 second instead of saying 'basically'.", "Your pace of 127 WPM is very good, keep it up!"]"""

_ARRAY_PATTERN = re.compile(r"\[[\s\S]*?\]")


class TipParseError(ValueError):
    """Raised when no usable tips can be recovered from an LLM reply."""


def build_user_prompt(context: TipContext) -> str:
    filler_list = ", ".join(context.filler_words_found) or "none detected"

    if context.accuracy_score is not None:
        suffix = " (compared to target text)" if context.prompt_text else ""
        accuracy_line = f"- Accuracy score: {context.accuracy_score}%{suffix}"
    else:
        accuracy_line = "- Accuracy score: N/A (free practice mode)"

    excerpt = context.transcript[:TRANSCRIPT_EXCERPT_CHARS]
    return (
        "Student speaking session data:\n"
        f'- Transcript: "{excerpt}"\n'
        f"- Speaking pace: {context.wpm} words per minute (ideal: 130-150 WPM for interviews)\n"
        f"- Filler words detected: {filler_list} (used {context.filler_count} times total)\n"
        f"{accuracy_line}\n"
        f"- Session type: {context.session_kind.value}\n"
        f"- Student's native language: {context.native_language}\n"
        "\n"
        "Give them 2-3 encouraging, specific tips to improve.\n"
        "Return only a JSON array of strings."
    )


def _as_tips(candidate: Any) -> list[str] | None:
    if not isinstance(candidate, list) or not all(isinstance(item, str) for item in candidate):
        return None
    return [item.strip() for item in candidate if item.strip()]


def parse_tips(content: str) -> list[str]:
    """Recover at most ``MAX_TIPS`` tips from a raw LLM reply."""

    tips: list[str] | None = None
    try:
        tips = _as_tips(json.loads(content))
    except json.JSONDecodeError:
        tips = None

    if not tips:
        match = _ARRAY_PATTERN.search(content)
        if match:
            try:
                tips = _as_tips(json.loads(match.group(0)))
            except json.JSONDecodeError:
                tips = None

    if not tips:
        raise TipParseError("Could not parse tips from LLM response")
    return tips[:MAX_TIPS]


class BedrockTipGenerator(TipGenerator):
    """Single-shot tip generation; retries and fallback belong to the caller."""

    def __init__(self, llm_client: BedrockLlmClient | None = None) -> None:
        self._llm = llm_client or BedrockLlmClient()

    async def generate_tips(self, context: TipContext) -> list[str]:
        raw_response = await self._llm.invoke(
            system_prompt=SYSTEM_PROMPT,
            user_prompt=build_user_prompt(context),
        )
        logger.debug("Raw tip response: %s", raw_response[:500])
        return parse_tips(raw_response)


__all__ = [
    "BedrockTipGenerator",
    "FALLBACK_TIPS",
    "MAX_TIPS",
    "TipParseError",
    "build_user_prompt",
    "parse_tips",
]

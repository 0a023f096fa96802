"""Gemini chat model used for quiz generation.

Usage:
    from app.core.llm import get_llm

    llm = get_llm()
    response = llm.invoke("Hello")
"""

import functools
import logging

from langchain_google_genai import ChatGoogleGenerativeAI

from .config import settings
from .errors import GenerationUnavailable

logger = logging.getLogger(__name__)


@functools.lru_cache(maxsize=1)
def get_llm() -> ChatGoogleGenerativeAI:
    if not settings.GEMINI_API_KEY:
        raise GenerationUnavailable("Gemini API key is not configured")

    logger.info("Initialising Gemini model %s", settings.GEMINI_MODEL)
    return ChatGoogleGenerativeAI(
        model=settings.GEMINI_MODEL,
        google_api_key=settings.GEMINI_API_KEY,
        temperature=settings.GENERATION_TEMPERATURE,
        max_output_tokens=settings.GENERATION_MAX_OUTPUT_TOKENS,
        timeout=settings.GENERATION_TIMEOUT,
        max_retries=1,
    )

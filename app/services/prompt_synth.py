import logging
from typing import Any, Dict, List

from app.core.config import get_settings
from app.core.prompts import ANALYZE_LABELS, ANALYZE_PROMPT, LANGUAGE_INSTRUCTIONS
from app.schemas.assets import AssetMap, Language
from app.services.errors import AnalysisFailed
from app.services.gemini import GeminiError, gemini_generate_content, response_text, text_part

logger = logging.getLogger(__name__)


def build_analyze_parts(assets: AssetMap, language: Language) -> List[Dict[str, Any]]:
    prompt = ANALYZE_PROMPT.format(language_instruction=LANGUAGE_INSTRUCTIONS[language])
    parts: List[Dict[str, Any]] = [text_part(prompt)]
    for role, record in assets.non_face():
        parts.append(text_part(f"\n[REFERENCE IMAGE: {ANALYZE_LABELS[role]}]"))
        parts.append(record.inline_part())
    return parts


async def analyze_assets(assets: AssetMap, language: Language) -> str:
    """Ask the text model for one scene description built from the non-face references.

    The face is never sent. Callers check that there is something to analyze.
    """
    settings = get_settings()
    parts = build_analyze_parts(assets, language)

    try:
        data = await gemini_generate_content(settings.analyze_model, parts)
    except GeminiError as e:
        logger.warning("analysis failed: %s", e)
        raise AnalysisFailed(str(e)) from e

    try:
        text = response_text(data)
    except (AttributeError, TypeError) as e:
        raise AnalysisFailed(f"malformed analysis response: {str(data)[:500]}") from e
    logger.info("analysis returned %d chars", len(text))
    return text

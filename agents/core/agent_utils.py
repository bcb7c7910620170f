"""
Agent Utilities Module for ConceptGraph

Parsing helpers for LLM output: JSON extraction from chatty or fenced
answers, formatting cleanup, and language detection.
"""

import re
import json
from typing import Any, Optional
import logging

logger = logging.getLogger(__name__)


def extract_json_from_response(response_content) -> Optional[Any]:
    """
    Extract JSON from LLM response content.

    Handles legitimate formatting issues:
    - Markdown code blocks (```json ... ```)
    - Leading or trailing prose around the JSON object
    - Unicode quote characters (smart quotes)
    - Trailing commas (common JSON extension)
    - Basic whitespace/control characters

    Args:
        response_content (str): Raw response content from LLM

    Returns:
        dict, list or None: Extracted JSON data or None if failed
    """
    if not response_content:
        logger.warning("Empty response content provided")
        return None

    content = str(response_content).strip()

    # Markdown code blocks first, then the outermost object or array
    json_content = None
    json_match = re.search(r'```(?:json)?\s*\n(.*?)\n?```', content, re.DOTALL)
    if json_match:
        json_content = json_match.group(1).strip()
    else:
        json_content = _find_balanced(content, '{', '}') or _find_balanced(content, '[', ']')

    if not json_content:
        content_preview = content[:500] + "..." if len(content) > 500 else content
        logger.error(f"Failed to extract JSON: No JSON structure found in response. Content: {content_preview}")
        return None

    cleaned = _clean_json_string(json_content)

    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        content_preview = cleaned[:500] + "..." if len(cleaned) > 500 else cleaned
        logger.error(
            f"Failed to parse JSON: {e} "
            f"(position: {getattr(e, 'pos', None)}). "
            f"Content preview: {content_preview}"
        )
        return None


def _find_balanced(content: str, open_char: str, close_char: str) -> Optional[str]:
    """Return the first balanced open/close span, ignoring characters inside strings."""
    start = content.find(open_char)
    if start == -1:
        return None

    depth = 0
    in_string = False
    escape_next = False
    for i in range(start, len(content)):
        char = content[i]

        if escape_next:
            escape_next = False
            continue
        if char == '\\':
            escape_next = True
            continue
        if char == '"':
            in_string = not in_string
            continue

        if not in_string:
            if char == open_char:
                depth += 1
            elif char == close_char:
                depth -= 1
                if depth == 0:
                    return content[start:i + 1]

    # Unbalanced: take everything up to the last closing character
    end = content.rfind(close_char)
    if end > start:
        return content[start:end + 1]
    return None


def _clean_json_string(text: str) -> str:
    """
    Clean JSON string by fixing legitimate formatting issues.

    Only fixes issues that don't change JSON semantics:
    - Unicode quote normalization
    - Control character removal
    - Trailing comma removal (common JSON extension)

    Does NOT attempt to fix structural problems (truncated JSON, missing brackets, etc.)

    Args:
        text: Raw JSON text to clean

    Returns:
        Cleaned text
    """
    # Remove markdown code block markers if still present
    text = re.sub(r'```(?:json)?\s*\n?', '', text)

    text = text.strip().strip('`')

    text = text.replace('\u201c', '"').replace('\u201d', '"')
    text = text.replace('\u2018', "'").replace('\u2019', "'")

    text = re.sub(r'[\u200B-\u200D\uFEFF]', '', text)
    text = re.sub(r'[\x00-\x08\x0B\x0C\x0E-\x1F]', '', text)

    text = re.sub(r',\s*(\]|\})', r'\1', text)

    return text.strip()


def detect_language(text: str) -> str:
    """
    Guess whether text is Spanish or English.

    Returns:
        str: 'es' for Spanish, 'en' otherwise
    """
    if not text:
        return 'en'
    if re.search(r'[áéíóúñ¿¡]', text.lower()):
        return 'es'
    words = re.findall(r'[a-záéíóúñ]+', text.lower())
    spanish_markers = {'el', 'la', 'los', 'las', 'de', 'del', 'y', 'en', 'que', 'por', 'para', 'con'}
    hits = sum(1 for word in words if word in spanish_markers)
    return 'es' if words and hits * 3 >= len(words) else 'en'

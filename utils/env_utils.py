"""
Environment File Utilities
==========================

Utility functions for handling .env file encoding before it is loaded.
"""

import logging
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)

# Encodings editors commonly use when saving a .env file on Windows.
# UTF-16 is only tried when the file starts with a byte order mark.
_FALLBACK_ENCODINGS = ('cp1252', 'latin1')
_UTF16_BOMS = (b'\xff\xfe', b'\xfe\xff')


def ensure_utf8_env_file(env_path: str = ".env") -> None:
    """
    Ensure .env file is UTF-8 encoded before loading.

    A non-UTF-8 file is re-read with the first fallback encoding that decodes
    it and written back as UTF-8, keeping a one-time backup next to it.

    Args:
        env_path: Path to .env file (default: ".env")

    Raises:
        ValueError: If the file cannot be decoded or rewritten
    """
    env_file = Path(env_path)
    if not env_file.exists():
        return

    raw = env_file.read_bytes()
    try:
        raw.decode('utf-8')
        return
    except UnicodeDecodeError:
        logger.warning(".env file is not UTF-8 encoded, attempting to convert...")

    content = None
    detected_encoding = None
    encodings = ('utf-16',) + _FALLBACK_ENCODINGS if raw.startswith(_UTF16_BOMS) else _FALLBACK_ENCODINGS
    for encoding in encodings:
        try:
            content = raw.decode(encoding)
            detected_encoding = encoding
            break
        except (UnicodeDecodeError, UnicodeError):
            continue

    if content is None:
        raise ValueError("Cannot read .env file: invalid encoding. Please save the file as UTF-8.")

    backup_path = env_file.with_name(env_file.name + '.backup')
    try:
        if not backup_path.exists():
            shutil.copy2(env_file, backup_path)
            logger.info(f"Created backup: {backup_path}")
        env_file.write_text(content, encoding='utf-8', newline='')
    except OSError as e:
        raise ValueError(f"Cannot convert .env file to UTF-8: {e}") from e

    logger.info(f"Converted .env file from {detected_encoding} to UTF-8")

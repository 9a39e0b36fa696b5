"""
Decoding of the explorer's SourceCode field into individual source files.

The field comes in three shapes:
- plain Solidity/Vyper text (single-file verification)
- Standard-Input-JSON, i.e. {"language": "Solidity", "sources": {...}}
- the same JSON wrapped in an extra pair of braces ({{ ... }})
"""

import json
import logging
import re
from typing import Any, Iterable, List, Mapping

from .constants import DEFAULT_SOURCE_FILE
from .models import DecodedFile

logger = logging.getLogger(__name__)

# Wrapper directories like 'solc_0.8/' or 'solc_0.8.19/' added by some uploads
_WRAPPER_PREFIX = re.compile(r"^solc_[\d.]+/")


def strip_wrapper_prefix(path: str) -> str:
    """Remove a leading 'solc_<version>/' segment, leaving the rest of the path intact."""
    return _WRAPPER_PREFIX.sub("", path, count=1)


def _files_from_sources(sources: Mapping[str, Any]) -> List[DecodedFile]:
    files = []
    for file_path, entry in sources.items():
        content = entry.get("content") if isinstance(entry, Mapping) else None
        if not content:
            content = ""
        elif not isinstance(content, str):
            content = str(content)
        files.append(DecodedFile(path=strip_wrapper_prefix(str(file_path)), content=content))
    return files


def _single_file(raw: str) -> List[DecodedFile]:
    return [DecodedFile(path=DEFAULT_SOURCE_FILE, content=raw)]


def decode_source_code(raw: str) -> List[DecodedFile]:
    """
    Split a SourceCode field into (path, content) files.

    Never raises: anything that cannot be decoded as multi-file JSON is
    returned as a single Contract.sol holding the raw input.

    Args:
        raw: SourceCode string from getsourcecode

    Returns:
        Decoded files in the order they appear in the sources map
    """
    if raw.startswith("{{"):
        try:
            parsed = json.loads(raw[1:-1])
        except (ValueError, RecursionError) as e:
            logger.warning(f"Failed to parse multi-file format, treating as single file: {e}")
            return _single_file(raw)

        sources = parsed.get("sources") if isinstance(parsed, dict) else None
        if not isinstance(sources, Mapping):
            logger.warning("Multi-file source has no 'sources' map")
            return []

        files = _files_from_sources(sources)
        logger.info(f"Decoded {len(files)} files from wrapped Standard-Input-JSON")
        return files

    if raw.startswith("{"):
        try:
            parsed = json.loads(raw)
        except (ValueError, RecursionError) as e:
            logger.warning(f"Failed to parse JSON format, treating as single file: {e}")
            parsed = None

        if isinstance(parsed, dict) and parsed.get("language") == "Solidity":
            sources = parsed.get("sources")
            if sources and isinstance(sources, Mapping):
                files = _files_from_sources(sources)
                logger.info(f"Decoded {len(files)} files from Standard-Input-JSON")
                return files

    return _single_file(raw)


def encode_standard_json(files: Iterable[DecodedFile], wrapped: bool = False) -> str:
    """
    Render files as a Solidity Standard-Input-JSON SourceCode value.

    Args:
        files: Files to encode
        wrapped: Add the extra outer braces the explorer uses for multi-file uploads

    Returns:
        JSON string accepted by decode_source_code
    """
    payload = {
        "language": "Solidity",
        "sources": {f.path: {"content": f.content} for f in files},
    }
    encoded = json.dumps(payload)
    if wrapped:
        return "{" + encoded + "}"
    return encoded

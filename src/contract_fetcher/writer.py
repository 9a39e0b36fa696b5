"""Writing decoded sources and metadata.json to disk."""

import json
import logging
import re
from pathlib import Path, PurePosixPath
from typing import Iterable, List, Union

from .constants import METADATA_FILE_NAME
from .models import ContractMetadata, ContractRecord, DecodedFile

logger = logging.getLogger(__name__)

# json.loads pairs valid surrogates, so any left in a str are unpaired
_LONE_SURROGATE = re.compile("[\ud800-\udfff]")


class ContractWriteError(OSError):
    """Saving contract files failed (I/O error or a path escaping the output root)."""


def _relative_target(output_root: Path, source_path: str) -> Path:
    rel = PurePosixPath(source_path.replace("\\", "/"))
    if rel.is_absolute() or ".." in rel.parts or str(rel) in ("", "."):
        raise ContractWriteError(f"Refusing to write outside {output_root}: {source_path!r}")
    return output_root.joinpath(*rel.parts)


def _write_text(path: Path, content: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(_LONE_SURROGATE.sub("\ufffd", content), encoding="utf-8")
    except OSError as e:
        raise ContractWriteError(e.errno, f"Failed to write {path}: {e.strerror or e}", str(path)) from e
    except UnicodeError as e:
        raise ContractWriteError(None, f"Failed to write {path!r}: {e}") from e


def save_contract_files(
    output_root: Union[str, Path],
    record: ContractRecord,
    files: Iterable[DecodedFile],
) -> List[Path]:
    """
    Write decoded source files and a metadata.json descriptor.

    Existing files are overwritten; directories are created as needed.

    Args:
        output_root: Directory to write into
        record: Contract record the files were decoded from
        files: Decoded source files

    Returns:
        Written paths in write order (metadata.json last)

    Raises:
        ContractWriteError: If any directory or file cannot be written
    """
    output_root = Path(output_root)
    try:
        output_root.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ContractWriteError(e.errno, f"Failed to create {output_root}: {e.strerror or e}", str(output_root)) from e

    saved_files = []
    for decoded in files:
        target = _relative_target(output_root, decoded.path)
        _write_text(target, decoded.content)
        saved_files.append(target)

    metadata = ContractMetadata.from_record(record)
    metadata_path = output_root / METADATA_FILE_NAME
    _write_text(metadata_path, json.dumps(metadata.to_json_dict(), indent=2))
    saved_files.append(metadata_path)

    logger.info(f"Saved {len(saved_files)} files to {output_root}")
    return saved_files

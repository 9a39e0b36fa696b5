"""Fetch -> decode -> save flow used by the CLI."""

import logging
from pathlib import Path
from typing import List, Literal, Union

from pydantic import BaseModel

from .client import EtherscanClient
from .constants import METADATA_FILE_NAME
from .decoding import decode_source_code
from .models import ContractRecord, FetchFailure
from .writer import save_contract_files

logger = logging.getLogger(__name__)


class SaveResult(BaseModel):
    ok: Literal[True] = True
    record: ContractRecord
    files: List[Path]

    def first_level_entries(self, output_root: Union[str, Path]) -> List[str]:
        """Sorted top-level files/directories written, excluding the metadata file."""
        root = Path(output_root)
        entries = set()
        for path in self.files:
            first = path.relative_to(root).parts[0]
            if first != METADATA_FILE_NAME:
                entries.add(first)
        return sorted(entries)


def fetch_and_save(
    client: EtherscanClient,
    chain_id: int,
    address: str,
    output_root: Union[str, Path],
) -> Union[SaveResult, FetchFailure]:
    """
    Fetch verified source for an address and write it under output_root.

    Returns:
        SaveResult on success, the FetchFailure otherwise

    Raises:
        ContractWriteError: If writing to disk fails
    """
    outcome = client.fetch(chain_id, address)
    if not outcome.ok:
        return outcome

    record = outcome.record
    files = decode_source_code(record.raw_source_code)
    logger.info(f"Decoded {len(files)} source file(s) for {record.contract_name or address}")

    written = save_contract_files(output_root, record, files)
    return SaveResult(record=record, files=written)

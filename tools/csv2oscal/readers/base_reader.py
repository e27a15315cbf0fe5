"""
Base reader class for csv2oscal

Provides source hashing and CIR metadata common to all row readers.
"""

import hashlib
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict

from ..exceptions import SourceUnavailable


class BaseReader(ABC):
    """Base class for all row readers"""

    def __init__(self, file_path: Path):
        self.file_path = Path(file_path)
        if not self.file_path.is_file():
            raise SourceUnavailable(f"Input file not found: {file_path}")

        self.file_hash = self._calculate_file_hash()
        self.extraction_date = datetime.now(timezone.utc).replace(microsecond=0).isoformat()

    def _calculate_file_hash(self) -> str:
        """Calculate SHA-256 hash of input file"""
        hasher = hashlib.sha256()
        try:
            with open(self.file_path, 'rb') as f:
                for chunk in iter(lambda: f.read(4096), b""):
                    hasher.update(chunk)
        except OSError as e:
            raise SourceUnavailable(f"Cannot read {self.file_path}: {e}") from e
        return hasher.hexdigest()

    @abstractmethod
    def to_cir(self) -> Dict[str, Any]:
        """Convert input to Canonical Intermediate Representation"""
        pass

    def _create_base_metadata(self, source_type: str, **additional) -> Dict[str, Any]:
        """Create base metadata section for CIR"""
        return {
            "source_file": str(self.file_path),
            "source_type": source_type,
            "extraction_date": self.extraction_date,
            "hash": self.file_hash,
            **additional
        }

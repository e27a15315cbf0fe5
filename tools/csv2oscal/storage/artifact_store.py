"""
Artifact store for generated component definitions

Artifacts are keyed by document id, so every conversion gets its own file and
concurrent conversions never overwrite each other. The store also records
which artifact was written last.
"""

import logging
import os
import re
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Tuple

from ..exceptions import ArtifactNotFound
from ..serialization import FORMATS

logger = logging.getLogger(__name__)

DOCUMENT_ID_PATTERN = re.compile(r'^[A-Za-z0-9][A-Za-z0-9_-]{0,127}$')


class ArtifactStore(ABC):
    """Interface for persisting serialized component definitions"""

    @abstractmethod
    def save(self, document_id: str, content: str, fmt: str = "yaml") -> Path:
        """Persist an artifact and mark it as the latest one"""
        pass

    @abstractmethod
    def load(self, document_id: str) -> Tuple[str, str]:
        """Return (content, format) for a stored artifact"""
        pass

    @abstractmethod
    def latest(self) -> Optional[str]:
        """Id of the most recently saved artifact, if any"""
        pass


class FileSystemArtifactStore(ArtifactStore):
    """Artifact store writing one file per document under a directory"""

    LATEST_POINTER = "LATEST"

    def __init__(self, output_dir: Path):
        self.output_dir = Path(output_dir)

    def save(self, document_id: str, content: str, fmt: str = "yaml") -> Path:
        if not DOCUMENT_ID_PATTERN.match(document_id):
            raise ValueError(f"Invalid document id: {document_id!r}")
        if fmt not in FORMATS:
            raise ValueError(f"Unsupported artifact format: {fmt}")

        self.output_dir.mkdir(parents=True, exist_ok=True)

        # Only one format is kept per document
        for other_fmt in FORMATS:
            if other_fmt != fmt:
                self._artifact_path(document_id, other_fmt).unlink(missing_ok=True)

        artifact_path = self._artifact_path(document_id, fmt)
        self._atomic_write(artifact_path, content)
        self._atomic_write(self.output_dir / self.LATEST_POINTER, document_id)

        logger.info(f"Stored artifact: {artifact_path}")
        return artifact_path

    def load(self, document_id: str) -> Tuple[str, str]:
        path, fmt = self.find(document_id)
        return path.read_text(encoding='utf-8'), fmt

    def find(self, document_id: str) -> Tuple[Path, str]:
        """Locate the artifact file for a document id"""
        if not DOCUMENT_ID_PATTERN.match(document_id or ""):
            raise ArtifactNotFound(f"No artifact for document id: {document_id!r}")

        for fmt in FORMATS:
            path = self._artifact_path(document_id, fmt)
            if path.is_file():
                return path, fmt

        raise ArtifactNotFound(f"No artifact for document id: {document_id}")

    def latest(self) -> Optional[str]:
        pointer = self.output_dir / self.LATEST_POINTER
        if not pointer.is_file():
            return None

        document_id = pointer.read_text(encoding='utf-8').strip()
        try:
            self.find(document_id)
        except ArtifactNotFound:
            logger.warning(f"Latest artifact pointer references missing document: {document_id}")
            return None

        return document_id

    def _artifact_path(self, document_id: str, fmt: str) -> Path:
        return self.output_dir / f"{document_id}{FORMATS[fmt]}"

    def _atomic_write(self, path: Path, content: str) -> None:
        """Write through a temporary file so readers never see partial content"""
        fd, temp_name = tempfile.mkstemp(dir=self.output_dir, prefix=".tmp-")
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                f.write(content)
            os.replace(temp_name, path)
        except BaseException:
            Path(temp_name).unlink(missing_ok=True)
            raise

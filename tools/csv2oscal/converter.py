"""
End-to-end conversion

Inputs (CSV/XLSX) → ControlReader → CIR → ComponentDefinitionMapper → YAML/JSON
"""

import logging
from pathlib import Path
from typing import Any, Dict, NamedTuple, Optional

from .mappers import ComponentDefinitionMapper
from .mappers.base_mapper import IdGenerator
from .models import ComponentDefinition
from .readers import ControlReader
from .serialization import dump

logger = logging.getLogger(__name__)


class Conversion(NamedTuple):
    document: ComponentDefinition
    content: str
    fmt: str
    source: Dict[str, Any]

    @property
    def document_id(self) -> str:
        return self.document.uuid


def convert_file(input_path: Path, fmt: str = "yaml",
                 id_generator: Optional[IdGenerator] = None) -> Conversion:
    """Read a control listing and encode it as an OSCAL component definition"""
    cir = ControlReader(input_path).to_cir()
    source = cir["metadata"]
    logger.debug(f"Source {source['source_file']} sha256={source['hash']}")

    document = ComponentDefinitionMapper(id_generator=id_generator).map(cir)
    content = dump(document, fmt)

    return Conversion(document=document, content=content, fmt=fmt.lower(), source=source)

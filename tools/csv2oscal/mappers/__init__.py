"""
OSCAL mappers for csv2oscal

Mappers convert Canonical Intermediate Representation (CIR) rows to OSCAL records.
"""

from .base_mapper import BaseMapper, uuid4_generator
from .component_mapper import ComponentDefinitionMapper, transform

__all__ = [
    'BaseMapper',
    'ComponentDefinitionMapper',
    'transform',
    'uuid4_generator'
]

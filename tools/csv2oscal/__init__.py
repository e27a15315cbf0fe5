"""
csv2oscal - control listing to OSCAL component definition converter

Converts a tabular listing of security controls (.csv/.xlsx) into an OSCAL
component definition, one software component per control row.

Architecture:
    Inputs (CSV/XLSX) → Readers → CIR → Mappers → OSCAL YAML/JSON → Artifact store
"""

__version__ = "1.0.0"
__author__ = "csv2oscal contributors"
__license__ = "Apache-2.0"

from .exceptions import (
    ArtifactNotFound,
    Csv2OscalError,
    MalformedInput,
    SerializationFailure,
    SourceUnavailable,
)
from .mappers import transform

__all__ = [
    'ArtifactNotFound',
    'Csv2OscalError',
    'MalformedInput',
    'SerializationFailure',
    'SourceUnavailable',
    'transform'
]

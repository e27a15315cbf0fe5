"""
Exception hierarchy for csv2oscal

Every failure raised by the readers, mappers, serializer and artifact store
derives from Csv2OscalError so callers can handle a conversion failure in one place.
"""

from typing import Optional


class Csv2OscalError(Exception):
    """Base exception for all csv2oscal errors"""


class SourceUnavailable(Csv2OscalError):
    """Raised when the row source or its header row cannot be opened or read"""


class MalformedInput(Csv2OscalError):
    """Raised when a data row lacks the required control columns"""
    
    def __init__(self, row_index: int, field_count: int, required: int = 3,
                 line_number: Optional[int] = None):
        self.row_index = row_index
        self.field_count = field_count
        self.required = required
        self.line_number = line_number
        
        location = f"row {row_index}"
        if line_number is not None:
            location += f" (line {line_number})"
        
        super().__init__(
            f"Malformed input at {location}: expected at least {required} fields, "
            f"got {field_count}"
        )


class SerializationFailure(Csv2OscalError):
    """Raised when a component definition cannot be encoded"""


class ArtifactNotFound(Csv2OscalError):
    """Raised when the artifact store holds no document for the requested id"""

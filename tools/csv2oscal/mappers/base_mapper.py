"""
Base mapper class for OSCAL conversions

Provides identifier generation, timestamps and common OSCAL record builders
for all CIR to OSCAL mappers.
"""

import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Callable, List, Optional

from ..models import Link, Metadata, Party

IdGenerator = Callable[[], str]
Clock = Callable[[], datetime]


def uuid4_generator() -> str:
    """Generate a random UUID for OSCAL objects"""
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class BaseMapper(ABC):
    """Base class for all CIR to OSCAL mappers"""

    OSCAL_VERSION = "1.0.4"

    def __init__(self, id_generator: Optional[IdGenerator] = None,
                 clock: Optional[Clock] = None):
        self.id_generator = id_generator or uuid4_generator
        self.clock = clock or utc_now

    def generate_uuid(self) -> str:
        """Generate a fresh identifier for OSCAL objects"""
        return self.id_generator()

    def timestamp(self) -> str:
        """Current time as an RFC 3339 timestamp with second precision"""
        return self.clock().replace(microsecond=0).isoformat()

    def create_oscal_metadata(self, title: str, version: str = "1.0",
                              parties: Optional[List[Party]] = None) -> Metadata:
        """Create OSCAL metadata section"""
        return Metadata(
            version=version,
            last_modified=self.timestamp(),
            oscal_version=self.OSCAL_VERSION,
            title=title,
            parties=parties or []
        )

    def create_party(self, name: str, party_type: str = "organization",
                     uuid_val: Optional[str] = None,
                     links: Optional[List[Link]] = None) -> Party:
        """Create OSCAL party object"""
        return Party(
            type=party_type,
            name=name,
            uuid=uuid_val or self.generate_uuid(),
            links=links or []
        )

    def create_link(self, href: str, rel: str) -> Link:
        """Create OSCAL link object"""
        return Link(rel=rel, href=href)

    @abstractmethod
    def map(self, cir_data: Any) -> Any:
        """Map CIR data to OSCAL format"""
        pass

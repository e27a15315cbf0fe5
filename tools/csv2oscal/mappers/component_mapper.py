"""
Component definition mapper

Converts CIR control rows to an OSCAL component definition. Each data row
becomes one software component carrying a single control implementation with
a single implemented requirement.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from ..exceptions import MalformedInput
from ..models import (
    Component,
    ComponentDefinition,
    ControlImplementation,
    ImplementedRequirement,
    Metadata,
    ResponsibleRole,
)
from .base_mapper import BaseMapper, Clock, IdGenerator

logger = logging.getLogger(__name__)

Row = Sequence[Any]


class ComponentDefinitionMapper(BaseMapper):
    """Mapper for control rows to an OSCAL component definition"""

    DOCUMENT_VERSION = "0.0.1"
    DOCUMENT_TITLE = "DUBBD"

    ORGANIZATION_NAME = "Defense Unicorns"
    ORGANIZATION_WEBSITE = "https://defenseunicorns.com"

    COMPONENT_TYPE = "software"
    COMPONENT_PURPOSE = "Purpose of the component"
    PROVIDER_ROLE = "provider"
    CATALOG_SOURCE = (
        "https://raw.githubusercontent.com/usnistgov/oscal-content/master/"
        "nist.gov/SP800-53/rev5/json/NIST_SP-800-53_rev5_catalog.json"
    )

    # controlId, componentName, controlDescription
    REQUIRED_FIELDS = 3

    def map(self, cir_data: Union[Dict[str, Any], Iterable[Row]]) -> ComponentDefinition:
        """Map control rows (or a reader CIR dict) to an OSCAL component definition"""
        line_numbers: List[Optional[int]] = []
        if isinstance(cir_data, dict):
            rows = list(cir_data.get("rows", []))
            line_numbers = list(cir_data.get("line_numbers", []))
        else:
            rows = list(cir_data)

        logger.info(f"Mapping {len(rows)} control rows to OSCAL component definition")

        document_uuid = self.generate_uuid()
        metadata = self._build_metadata()

        components = []
        for index, row in enumerate(rows):
            line_number = line_numbers[index] if index < len(line_numbers) else None
            components.append(self._build_component(index, row, line_number))

        logger.info(f"Built {len(components)} components")

        return ComponentDefinition(
            uuid=document_uuid,
            metadata=metadata,
            components=components
        )

    def _build_metadata(self) -> Metadata:
        """Build fixed metadata with the synthesized authoring organization"""
        organization = self.create_party(
            name=self.ORGANIZATION_NAME,
            links=[self.create_link(href=self.ORGANIZATION_WEBSITE, rel="website")]
        )

        return self.create_oscal_metadata(
            title=self.DOCUMENT_TITLE,
            version=self.DOCUMENT_VERSION,
            parties=[organization]
        )

    def _build_component(self, index: int, row: Row,
                         line_number: Optional[int] = None) -> Component:
        """Build one component from a single control row"""
        if len(row) < self.REQUIRED_FIELDS:
            raise MalformedInput(
                row_index=index,
                field_count=len(row),
                required=self.REQUIRED_FIELDS,
                line_number=line_number
            )

        control_id, component_name, description = (str(value) for value in row[:3])

        component_uuid = self.generate_uuid()
        requirement_uuid = self.generate_uuid()

        # The provider party reference is not tied to any metadata party
        provider_reference = self.generate_uuid()

        requirement = ImplementedRequirement(
            uuid=requirement_uuid,
            control_id=control_id,
            description=description
        )

        implementation = ControlImplementation(
            source=self.CATALOG_SOURCE,
            description=self._implementation_description(component_name),
            uuid=self.generate_uuid(),
            implemented_requirements=[requirement]
        )

        return Component(
            uuid=component_uuid,
            title=component_name,
            description=description,
            type=self.COMPONENT_TYPE,
            purpose=self.COMPONENT_PURPOSE,
            responsible_roles=[
                ResponsibleRole(role_id=self.PROVIDER_ROLE, party_uuids=[provider_reference])
            ],
            control_implementations=[implementation]
        )

    def _implementation_description(self, component_name: str) -> str:
        return f"Controls implemented by {component_name} for inheritance by applications"


def transform(rows: Union[Dict[str, Any], Iterable[Row]],
              id_generator: Optional[IdGenerator] = None,
              clock: Optional[Clock] = None) -> ComponentDefinition:
    """Transform control rows into a component definition document"""
    return ComponentDefinitionMapper(id_generator=id_generator, clock=clock).map(rows)

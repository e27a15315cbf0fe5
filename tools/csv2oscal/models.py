"""
OSCAL component definition records

Named, immutable records for the component definition document. Field order
matches the order fields are emitted in, and aliases carry the hyphenated
OSCAL names.
"""

from typing import ClassVar, List

from pydantic import BaseModel, ConfigDict, Field


class OSCALModel(BaseModel):
    """Base record: frozen after construction, populated by field name or alias"""

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class Link(OSCALModel):
    rel: str
    href: str


class Party(OSCALModel):
    """An organization or person referenced by components"""

    type: str = "organization"
    name: str
    uuid: str
    links: List[Link] = Field(default_factory=list)


class Metadata(OSCALModel):
    version: str
    last_modified: str = Field(alias="last-modified")
    oscal_version: str = Field(alias="oscal-version")
    title: str
    parties: List[Party] = Field(default_factory=list)


class ResponsibleRole(OSCALModel):
    role_id: str = Field(alias="role-id")
    party_uuids: List[str] = Field(alias="party-uuids", default_factory=list)


class ImplementedRequirement(OSCALModel):
    uuid: str
    control_id: str = Field(alias="control-id")
    description: str


class ControlImplementation(OSCALModel):
    """Implemented requirements attributed to one control catalog source"""

    source: str
    description: str
    uuid: str
    implemented_requirements: List[ImplementedRequirement] = Field(
        alias="implemented-requirements", default_factory=list
    )


class Component(OSCALModel):
    """One software or hardware unit under configuration control"""

    uuid: str
    title: str
    description: str
    type: str = "software"
    purpose: str
    responsible_roles: List[ResponsibleRole] = Field(
        alias="responsible-roles", default_factory=list
    )
    control_implementations: List[ControlImplementation] = Field(
        alias="control-implementations", default_factory=list
    )


class ComponentDefinition(OSCALModel):
    """Root of an OSCAL component definition document"""

    ROOT_KEY: ClassVar[str] = "component-definition"

    uuid: str
    metadata: Metadata
    components: List[Component] = Field(default_factory=list)

    def iter_uuids(self):
        """Yield every generated identifier in the document, in document order"""
        yield self.uuid
        for party in self.metadata.parties:
            yield party.uuid
        for component in self.components:
            yield component.uuid
            for role in component.responsible_roles:
                yield from role.party_uuids
            for implementation in component.control_implementations:
                yield implementation.uuid
                for requirement in implementation.implemented_requirements:
                    yield requirement.uuid

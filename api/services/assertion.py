"""
SAML assertion parsing.

The SAMLResponse posted to https://signin.aws.amazon.com/saml is decoded once
into a ParsedAssertion, a flat list of named attributes that the provider and
session duration lookups query by exact name.
"""
import base64
import binascii
import logging
from dataclasses import dataclass
from typing import List, Tuple

from lxml import etree

from api.services.exceptions import MalformedAssertionError


logger = logging.getLogger(__name__)

SAML_ASSERTION_NS = "urn:oasis:names:tc:SAML:2.0:assertion"
ROLE_ATTRIBUTE = "https://aws.amazon.com/SAML/Attributes/Role"
SESSION_DURATION_ATTRIBUTE = "https://aws.amazon.com/SAML/Attributes/SessionDuration"
PROVIDER_MARKER = ":saml-provider/"

_ATTRIBUTE_TAG = f"{{{SAML_ASSERTION_NS}}}Attribute"


@dataclass(frozen=True)
class SamlAttribute:
    """A saml:Attribute and the text of each of its values, in document order."""
    name: str
    values: Tuple[str, ...]


@dataclass(frozen=True)
class RoleAttributeEntry:
    """One provider/role pair from the Role attribute."""
    principal_arn: str
    role_arn: str

    @classmethod
    def from_value(cls, value: str) -> "RoleAttributeEntry | None":
        """
        Build an entry from a comma-separated Role attribute value.

        Issuers do not agree on whether the provider or the role comes first,
        so the part carrying the saml-provider marker is taken as the provider.

        Returns:
            The entry, or None if the value is not exactly two parts
        """
        parts = [part.strip() for part in value.split(",")]
        if len(parts) != 2:
            return None
        if PROVIDER_MARKER in parts[0]:
            return cls(principal_arn=parts[0], role_arn=parts[1])
        return cls(principal_arn=parts[1], role_arn=parts[0])


@dataclass(frozen=True)
class ParsedAssertion:
    """Attributes extracted from a decoded SAML assertion."""
    attributes: Tuple[SamlAttribute, ...]

    def get_attribute(self, name: str) -> SamlAttribute | None:
        """Get the first attribute with the given name."""
        for attribute in self.attributes:
            if attribute.name == name:
                return attribute
        return None

    def get_attributes(self, name: str) -> List[SamlAttribute]:
        """Get every attribute with the given name."""
        return [attribute for attribute in self.attributes if attribute.name == name]

    def roles(self) -> List[RoleAttributeEntry]:
        """List the provider/role pairs the assertion allows."""
        entries = []
        for attribute in self.get_attributes(ROLE_ATTRIBUTE):
            for value in attribute.values:
                entry = RoleAttributeEntry.from_value(value)
                if entry is not None:
                    entries.append(entry)
        return entries


def _decode(encoded: str) -> bytes:
    # SAMLResponse form values are often wrapped across lines
    compact = "".join(encoded.split())
    if not compact:
        raise MalformedAssertionError("SAML assertion is empty")
    try:
        return base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError) as e:
        raise MalformedAssertionError(f"SAML assertion is not valid base64: {e}") from e


def _element_text(element: etree._Element) -> str:
    return "".join(element.itertext())


def parse_assertion(encoded: str) -> ParsedAssertion:
    """
    Decode a base64 SAMLResponse and extract its attributes.

    Only saml:Attribute elements in the SAML 2.0 assertion namespace are
    kept. Each value is the full text of one element child of the attribute.

    Args:
        encoded: Base64 encoded SAMLResponse, as posted by the identity provider

    Returns:
        The parsed assertion

    Raises:
        MalformedAssertionError: If decoding or XML parsing fails
    """
    raw = _decode(encoded)

    parser = etree.XMLParser(resolve_entities=False, no_network=True, huge_tree=False)
    try:
        root = etree.fromstring(raw, parser=parser)
    except etree.XMLSyntaxError as e:
        raise MalformedAssertionError(f"SAML assertion is not well-formed XML: {e}") from e

    attributes = []
    for element in root.iter(_ATTRIBUTE_TAG):
        name = element.get("Name")
        if name is None:
            continue
        # Skip comments and processing instructions, whose tag is not a string
        values = tuple(
            _element_text(child) for child in element if isinstance(child.tag, str)
        )
        attributes.append(SamlAttribute(name=name, values=values))

    logger.debug(f"Parsed SAML assertion with {len(attributes)} attributes")
    return ParsedAssertion(attributes=tuple(attributes))

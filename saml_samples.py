"""
Sample SAML responses for the unit tests.
"""
import base64


ACCOUNT_ID = "123456789012"
PROVIDER_ARN = f"arn:aws:iam::{ACCOUNT_ID}:saml-provider/ExampleIdP"
ROLE_ARN = f"arn:aws:iam::{ACCOUNT_ID}:role/Admin"
OTHER_ROLE_ARN = f"arn:aws:iam::{ACCOUNT_ID}:role/ReadOnly"


def attribute(name, *values):
    """Build a saml:Attribute element with one AttributeValue per value."""
    value_xml = "".join(
        f'<saml:AttributeValue xsi:type="xs:string">{value}</saml:AttributeValue>'
        for value in values
    )
    return f'<saml:Attribute Name="{name}">{value_xml}</saml:Attribute>'


def saml_xml(*attributes):
    """Build a SAML 2.0 Response document holding the given attributes."""
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<samlp:Response xmlns:samlp="urn:oasis:names:tc:SAML:2.0:protocol" '
        'xmlns:saml="urn:oasis:names:tc:SAML:2.0:assertion" '
        'xmlns:xs="http://www.w3.org/2001/XMLSchema" '
        'xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance" '
        'ID="_response" Version="2.0">'
        '<saml:Issuer>https://idp.example.com</saml:Issuer>'
        '<saml:Assertion ID="_assertion" Version="2.0">'
        '<saml:AttributeStatement>'
        f'{"".join(attributes)}'
        '</saml:AttributeStatement>'
        '</saml:Assertion>'
        '</samlp:Response>'
    )


def encode(xml):
    """Base64 encode a SAML document the way it is posted to the sign-in page."""
    return base64.b64encode(xml.encode("utf-8")).decode("ascii")


def role_attribute(*values):
    return attribute("https://aws.amazon.com/SAML/Attributes/Role", *values)


def duration_attribute(*values):
    return attribute("https://aws.amazon.com/SAML/Attributes/SessionDuration", *values)


def saml_response(*attributes):
    """Build a base64 encoded SAMLResponse holding the given attributes."""
    return encode(saml_xml(*attributes))


DEFAULT_SAML_RESPONSE = saml_response(
    attribute("https://aws.amazon.com/SAML/Attributes/RoleSessionName", "jane@example.com"),
    role_attribute(f"{PROVIDER_ARN},{ROLE_ARN}"),
)

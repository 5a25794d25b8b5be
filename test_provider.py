"""
Unit tests for identity provider resolution.
"""
import unittest

from api.services.assertion import parse_assertion
from api.services.exceptions import ProviderNotFoundError
from api.services.provider import resolve_identity_provider
from saml_samples import ACCOUNT_ID, OTHER_ROLE_ARN, PROVIDER_ARN, ROLE_ARN, role_attribute, saml_response


class TestResolveIdentityProvider(unittest.TestCase):
    """Test cases for resolve_identity_provider."""

    def test_provider_first(self):
        """Test the usual provider,role ordering."""
        document = parse_assertion(saml_response(role_attribute(f"{PROVIDER_ARN},{ROLE_ARN}")))

        self.assertEqual(resolve_identity_provider(document, ROLE_ARN), PROVIDER_ARN)

    def test_role_first(self):
        """Test the role,provider ordering some issuers use."""
        document = parse_assertion(saml_response(role_attribute(f"{ROLE_ARN},{PROVIDER_ARN}")))

        self.assertEqual(resolve_identity_provider(document, ROLE_ARN), PROVIDER_ARN)

    def test_picks_value_for_selected_role(self):
        """Test that the provider is taken from the selected role's value."""
        other_provider = f"arn:aws:iam::{ACCOUNT_ID}:saml-provider/OtherIdP"
        document = parse_assertion(saml_response(role_attribute(
            f"{PROVIDER_ARN},{ROLE_ARN}",
            f"{other_provider},{OTHER_ROLE_ARN}",
        )))

        self.assertEqual(resolve_identity_provider(document, OTHER_ROLE_ARN), other_provider)

    def test_prefers_exact_role_match(self):
        """Test that a role whose ARN prefixes another role's ARN gets its own provider."""
        longer_role = f"{ROLE_ARN}Extended"
        other_provider = f"arn:aws:iam::{ACCOUNT_ID}:saml-provider/OtherIdP"
        document = parse_assertion(saml_response(role_attribute(
            f"{other_provider},{longer_role}",
            f"{PROVIDER_ARN},{ROLE_ARN}",
        )))

        self.assertEqual(resolve_identity_provider(document, ROLE_ARN), PROVIDER_ARN)

    def test_role_across_multiple_attributes(self):
        """Test that every Role attribute is searched."""
        document = parse_assertion(saml_response(
            role_attribute(f"{PROVIDER_ARN},{ROLE_ARN}"),
            role_attribute(f"{OTHER_ROLE_ARN},{PROVIDER_ARN}"),
        ))

        self.assertEqual(resolve_identity_provider(document, OTHER_ROLE_ARN), PROVIDER_ARN)

    def test_unknown_role_raises(self):
        """Test that a role missing from the assertion is an error."""
        document = parse_assertion(saml_response(role_attribute(f"{PROVIDER_ARN},{ROLE_ARN}")))

        with self.assertRaises(ProviderNotFoundError) as context:
            resolve_identity_provider(document, OTHER_ROLE_ARN)

        self.assertEqual(context.exception.role_arn, OTHER_ROLE_ARN)
        self.assertIn(OTHER_ROLE_ARN, str(context.exception))

    def test_no_role_attribute_raises(self):
        """Test an assertion with no Role attribute at all."""
        document = parse_assertion(saml_response())

        with self.assertRaises(ProviderNotFoundError):
            resolve_identity_provider(document, ROLE_ARN)

    def test_value_that_is_not_a_pair_raises(self):
        """Test a matching value that does not split into two parts."""
        document = parse_assertion(saml_response(role_attribute(f"{PROVIDER_ARN},{ROLE_ARN},extra")))

        with self.assertRaises(ProviderNotFoundError):
            resolve_identity_provider(document, ROLE_ARN)

    def test_empty_role_raises(self):
        """Test that an empty or blank role does not match every Role value."""
        document = parse_assertion(saml_response(role_attribute(f"{PROVIDER_ARN},{ROLE_ARN}")))

        for role_arn in ("", "   "):
            with self.subTest(role_arn=role_arn):
                with self.assertRaises(ProviderNotFoundError):
                    resolve_identity_provider(document, role_arn)

    def test_no_provider_marker_returns_second_part(self):
        """Test that the second part is used when neither part is a saml-provider."""
        oidc_provider = f"arn:aws:iam::{ACCOUNT_ID}:oidc-provider/OtherIdP"
        document = parse_assertion(saml_response(role_attribute(f"{oidc_provider},{ROLE_ARN}")))

        self.assertEqual(resolve_identity_provider(document, ROLE_ARN), ROLE_ARN)

    def test_agrees_with_role_listing(self):
        """Test that the resolved provider is the one listed for the role."""
        document = parse_assertion(saml_response(role_attribute(
            f"{ROLE_ARN} , {PROVIDER_ARN}",
            f"{PROVIDER_ARN},{OTHER_ROLE_ARN}",
        )))

        for entry in document.roles():
            with self.subTest(role_arn=entry.role_arn):
                self.assertEqual(resolve_identity_provider(document, entry.role_arn), entry.principal_arn)


if __name__ == "__main__":
    unittest.main()

"""
Unit tests for saml_access.py
These tests validate the script logic without making actual AWS API calls.
"""
import io
import os
import tempfile
import unittest
from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch

import saml_access
from api.services.exceptions import ExchangeError
from api.services.sts import CredentialSet
from saml_samples import DEFAULT_SAML_RESPONSE, OTHER_ROLE_ARN, PROVIDER_ARN, ROLE_ARN, role_attribute, saml_response


CREDENTIALS = CredentialSet(
    access_key_id="AK",
    secret_access_key="SK",
    session_token="TK",
    expiration=datetime(2026, 1, 14, 15, 0, tzinfo=timezone.utc)
)


class TestSamlAccessCli(unittest.TestCase):
    """Test cases for the saml_access command line."""

    def setUp(self):
        """Set up test fixtures."""
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)

        self.saml_file = os.path.join(self.tmpdir.name, "saml.txt")
        self.write_saml(DEFAULT_SAML_RESPONSE)

        settings_patcher = patch.object(
            saml_access.settings, "preferences_file", os.path.join(self.tmpdir.name, "preferences.json")
        )
        settings_patcher.start()
        self.addCleanup(settings_patcher.stop)

        exchange_patcher = patch("saml_access.SamlRoleExchange")
        self.mock_exchange_class = exchange_patcher.start()
        self.addCleanup(exchange_patcher.stop)
        self.mock_exchange = self.mock_exchange_class.return_value
        self.mock_exchange.assume_role = AsyncMock(return_value=CREDENTIALS)

    def write_saml(self, encoded):
        with open(self.saml_file, "w") as f:
            f.write(encoded)

    def run_cli(self, *args):
        stdout, stderr = io.StringIO(), io.StringIO()
        with patch("sys.stdout", stdout), patch("sys.stderr", stderr):
            code = saml_access.main(["--saml-file", self.saml_file, *args])
        return code, stdout.getvalue(), stderr.getvalue()

    def test_shell_export(self):
        """Test printing export lines for an explicit role."""
        code, out, _ = self.run_cli(ROLE_ARN, "--format", "shell-export")

        self.assertEqual(code, 0)
        self.assertEqual(out.splitlines(), [
            'export AWS_ACCESS_KEY_ID="AK"',
            'export AWS_SECRET_ACCESS_KEY="SK"',
            'export AWS_SESSION_TOKEN="TK"',
        ])
        kwargs = self.mock_exchange.assume_role.call_args.kwargs
        self.assertEqual(kwargs["principal_arn"], PROVIDER_ARN)
        self.assertEqual(kwargs["duration"], 3600)

    def test_sole_role_is_used_when_omitted(self):
        """Test that the only role in the assertion is picked automatically."""
        code, _, _ = self.run_cli("--format", "raw-fields")

        self.assertEqual(code, 0)
        self.assertEqual(self.mock_exchange.assume_role.call_args.kwargs["role_arn"], ROLE_ARN)

    def test_role_required_when_several(self):
        """Test that a role must be named when the assertion has several."""
        self.write_saml(saml_response(role_attribute(f"{PROVIDER_ARN},{ROLE_ARN}", f"{PROVIDER_ARN},{OTHER_ROLE_ARN}")))

        code, _, err = self.run_cli()

        self.assertEqual(code, 1)
        self.assertIn(OTHER_ROLE_ARN, err)
        self.mock_exchange.assume_role.assert_not_called()

    def test_list_roles(self):
        """Test listing roles without assuming one."""
        code, out, _ = self.run_cli("--list-roles")

        self.assertEqual(code, 0)
        self.assertEqual(out.strip(), f"{ROLE_ARN}\t{PROVIDER_ARN}")
        self.mock_exchange.assume_role.assert_not_called()

    def test_duration_flag_overrides(self):
        """Test that --duration is passed straight to the exchange."""
        self.run_cli(ROLE_ARN, "--duration", "14400", "--format", "raw-fields")

        self.assertEqual(self.mock_exchange.assume_role.call_args.kwargs["duration"], 14400)

    def test_profile_name_is_remembered(self):
        """Test that a profile name given once is reused next time."""
        self.run_cli(ROLE_ARN, "--format", "profile-config", "--profile-name", "dev")
        code, out, _ = self.run_cli(ROLE_ARN, "--format", "profile-config")

        self.assertEqual(code, 0)
        self.assertEqual(out.splitlines()[0], 'aws configure set profile.dev.aws_access_key_id "AK"')

    def test_last_format_is_remembered(self):
        """Test that the last export format becomes the default."""
        self.run_cli(ROLE_ARN, "--format", "windows-batch")
        _, out, _ = self.run_cli(ROLE_ARN)

        self.assertEqual(out.splitlines()[0], 'set AWS_ACCESS_KEY_ID="AK"')

    def test_text_format_shows_every_option(self):
        """Test the default human-readable output."""
        _, out, _ = self.run_cli(ROLE_ARN, "--format", "text")

        self.assertIn("AWS Credentials for Admin", out)
        self.assertIn('export AWS_ACCESS_KEY_ID="AK"', out)
        self.assertIn('Set-AWSCredential -AccessKey "AK" `', out)
        self.assertIn("profile.123456789012-Admin.aws_session_token", out)

    def test_exchange_error_message_is_printed(self):
        """Test that STS failures are reported with their message."""
        self.mock_exchange.assume_role.side_effect = ExchangeError("Invalid SAML assertion")

        code, _, err = self.run_cli(ROLE_ARN)

        self.assertEqual(code, 1)
        self.assertIn("ERROR: Invalid SAML assertion", err)

    def test_missing_saml_file(self):
        """Test a SAML file that does not exist."""
        self.saml_file = os.path.join(self.tmpdir.name, "missing.txt")

        code, _, err = self.run_cli(ROLE_ARN)

        self.assertEqual(code, 1)
        self.assertIn("ERROR:", err)


if __name__ == "__main__":
    unittest.main()

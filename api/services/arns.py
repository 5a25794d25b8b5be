"""
Helpers for picking apart IAM role ARNs.
"""


def account_id(role_arn: str) -> str:
    """Get the account ID from a role ARN (arn:aws:iam::<account>:role/<name>)."""
    parts = role_arn.split(":")
    return parts[4] if len(parts) > 4 else ""


def role_name(role_arn: str) -> str:
    """Get the role name, without any path, from a role ARN."""
    return role_arn[role_arn.rfind("/") + 1:]


def preference_key(role_arn: str) -> str:
    """
    Get the key a role's preferences are stored under.

    The key doubles as the default profile name, e.g. "123456789012-Admin".
    """
    return f"{account_id(role_arn)}-{role_name(role_arn)}"

"""Basic auth token construction for Kudu deployment credentials."""

import base64


def make_token(username: str, password: str) -> str:
    """Encode deployment credentials as a Basic auth token.

    Args:
        username: Deployment user name (e.g. ``$mysite``).
        password: Deployment password.

    Returns:
        Base64 of ``username:password``, ready for ``Authorization: Basic``.
    """
    return base64.b64encode(f"{username}:{password}".encode()).decode("ascii")

"""Application configuration loaded from environment variables."""

import os
from dataclasses import dataclass, field


@dataclass(frozen=True)
class KuduConfig:
    """Centralized client configuration.

    Required fields have no defaults and will cause a KeyError at startup
    if the corresponding environment variable is missing.
    """

    # Required — no defaults, fail at startup if missing
    site_name: str
    username: str
    password: str = field(repr=False)

    # Working directory for remote commands on the App Service host
    command_dir: str = "D:\\home"


def load_config() -> KuduConfig:
    """Construct a KuduConfig from environment variables.

    Required environment variables:
        KUDU_SITE_NAME: App Service site name (the ``<site>`` in ``<site>.scm.azurewebsites.net``).
        KUDU_USERNAME: Deployment user name.
        KUDU_PASSWORD: Deployment password.

    Optional environment variables (with defaults):
        KUDU_COMMAND_DIR: Remote working directory for commands (default: D:\\home).

    Returns:
        Configured KuduConfig instance.
    """
    return KuduConfig(
        site_name=os.environ["KUDU_SITE_NAME"],
        username=os.environ["KUDU_USERNAME"],
        password=os.environ["KUDU_PASSWORD"],
        command_dir=os.environ.get("KUDU_COMMAND_DIR", "D:\\home"),
    )

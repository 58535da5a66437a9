"""
zkapp-cli: deploy smart-contract projects to a zkApp GraphQL network.
Convenience exports for the deploy pipeline and its building blocks.
"""

from .version import __version__  # noqa: F401

# Core config & errors
from .config import DeployAlias, ProjectConfig, Settings  # noqa: F401
from .errors import (  # noqa: F401
    GraphQLError,
    PromptCancelled,
    SelectionCancelled,
    ZkCliError,
)

# Pipeline
from .pipeline import DeployRequest, DeployResult, DeployStatus, run_deploy  # noqa: F401

__all__ = [
    "__version__",
    "DeployAlias",
    "ProjectConfig",
    "Settings",
    "GraphQLError",
    "PromptCancelled",
    "SelectionCancelled",
    "ZkCliError",
    "DeployRequest",
    "DeployResult",
    "DeployStatus",
    "run_deploy",
]

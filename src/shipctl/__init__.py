"""shipctl - safe rollbacks for ECS services.

shipctl reverts a running ECS service to the task definition revision that
was active before the current one. Each rollback is recorded in a pluggable
revision history store once the service has stabilized.

Main features:
- One-command rollback with precondition checks
- Revision history in SSM Parameter Store, a local file, or memory
- Slack notifications for progress and failures
"""

from shipctl.lib.errors import ConfigError, RollbackError, ShipctlError

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "ConfigError",
    "RollbackError",
    "ShipctlError",
]

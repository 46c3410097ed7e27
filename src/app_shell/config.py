import logging
import os
import sys

from src.rules.models import Rules

logger = logging.getLogger(__name__)


def validate_ops_rules(rules: Rules) -> None:
    """
    Validate operational requirements before startup.
    """
    missing = [env_var for env_var in rules.ops.required_env if env_var not in os.environ]

    if missing:
        print(
            f"CRITICAL: Missing required environment variables: {', '.join(missing)}",
            file=sys.stderr,
        )
        sys.exit(1)

    logger.info("Configuration validated.")

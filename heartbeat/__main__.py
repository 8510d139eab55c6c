# ============================================================================
# HEARTBEAT - COMMAND LINE ENTRY POINT
# ============================================================================
# STATUS: Infrastructure - Standalone heartbeat from environment
# PURPOSE: python -m heartbeat
# CREATED: 17 OCT 2026
# ============================================================================
"""
Serve a heartbeat endpoint configured from the environment.

Usage:
    HEARTBEAT_SERVICE_NAME=orders \\
    HEARTBEAT_DEPENDENCIES='[{"name": "api", "connection": "https://api/health"}]' \\
    python -m heartbeat
"""

import sys

import uvicorn

from heartbeat.config import ConfigurationError, HeartbeatConfig
from heartbeat.logging import configure_logging, get_logger
from heartbeat.server import create_app


def main() -> int:
    try:
        config = HeartbeatConfig.from_env()
    except ConfigurationError as e:
        print(f"heartbeat: {e}", file=sys.stderr)
        return 2

    configure_logging(level=config.log_level, json_output=config.log_format == "json")
    logger = get_logger("heartbeat")
    logger.info(
        f"Serving {config.service_name} heartbeat on {config.host}:{config.port}{config.path} "
        f"({len(config.dependencies)} dependencies)"
    )

    uvicorn.run(
        create_app(config),
        host=config.host,
        port=config.port,
        log_config=None,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())

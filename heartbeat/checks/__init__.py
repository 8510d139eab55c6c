# ============================================================================
# DEPENDENCY CHECKS
# ============================================================================
# STATUS: Checks - URL prober and function executor
# PURPOSE: The two kinds of dependency check the aggregator dispatches to
# CREATED: 17 OCT 2026
# ============================================================================
"""
Dependency Checks

- check_url: GET an http/https endpoint and classify the response
- run_check_function: run a user check function with timeout and
  fault containment
"""

from heartbeat.checks.url import check_url
from heartbeat.checks.handler import run_check_function

__all__ = [
    "check_url",
    "run_check_function",
]

"""Single-packet reachability probe for the configured host."""

from __future__ import annotations

import logging
import subprocess

from soildeploy.config.models import LOCAL_HOSTS

logger = logging.getLogger(__name__)


def is_local_host(host: str) -> bool:
    return host in LOCAL_HOSTS


def probe_host(host: str, *, timeout: int = 2) -> bool:
    """Send one ICMP echo to *host*. Never raises; False means unreachable.

    A missing ``ping`` binary counts as unreachable.
    """
    cmd = ["ping", "-c", "1", "-W", str(timeout), host]
    logger.debug("Probing %s", host)
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout + 5,
        )
    except (OSError, subprocess.TimeoutExpired) as exc:
        logger.debug("ping failed: %s", exc)
        return False
    return result.returncode == 0

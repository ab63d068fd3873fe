"""structlog configuration for soildeploy.

Log lines go to stderr so they never mix with the result on stdout:
- Human (default): colored console lines
- JSON (--log-json): one object per line

Each command binds ``command`` and ``project_dir`` as context variables,
so debug lines from the compose client and the ping probe say which
stack they belong to. Credential fields are masked before rendering.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any

import structlog

APP_LOGGER = "soildeploy"
REDACTED = "***"
SECRET_FIELDS = frozenset({"password", "admin_password", "secret", "api_key", "token"})


def redact_secrets(
    _logger: Any, _method: str, event_dict: structlog.types.EventDict
) -> structlog.types.EventDict:
    """Mask credential-bearing fields (the admin password is read for the summary)."""
    for name in SECRET_FIELDS.intersection(event_dict):
        if event_dict[name]:
            event_dict[name] = REDACTED
    return event_dict


def bind_command_context(*, command: str | None, project_dir: Path) -> None:
    """Attach the running command and stack directory to every later log line."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        command=command or "-",
        project_dir=str(project_dir),
    )


def _renderer(log_json: bool) -> structlog.types.Processor:
    if log_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Route structlog and stdlib ``soildeploy.*`` loggers to stderr.

    Args:
        verbose: ``soildeploy`` loggers emit DEBUG (every external command).
            Otherwise WARNING and above only.
        log_json: JSON lines instead of the console renderer.
    """
    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        redact_secrets,
    ]

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_json),
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    logging.getLogger(APP_LOGGER).setLevel(logging.DEBUG if verbose else logging.WARNING)

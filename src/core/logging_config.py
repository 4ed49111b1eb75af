"""Logging setup shared by the CLI and the HTTP server.

Every module logs through `logging.getLogger(__name__)`; this module only
decides how records are rendered (Rich on the console).
"""

from __future__ import annotations

import logging

from rich.logging import RichHandler

_HANDLER_NAME = "xkcd-proxy-rich"


def configure_logging(level: str | int = "INFO") -> None:
    """Install a single Rich handler on the root logger.

    Calling it again only updates the level.
    """

    root = logging.getLogger()
    root.setLevel(level if isinstance(level, int) else level.upper())

    if any(h.get_name() == _HANDLER_NAME for h in root.handlers):
        return

    handler = RichHandler(rich_tracebacks=True, show_path=False, markup=False)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    root.addHandler(handler)

    # httpx logs every request at INFO; keep that for DEBUG runs only.
    if root.level > logging.DEBUG:
        logging.getLogger("httpx").setLevel(logging.WARNING)

"""Session-aware logging for word annotation.

Every record emitted while a document is annotated carries the component that
produced it and the id of the annotation session, so the records of one page
can be followed across the walker, annotator and backend client.
"""

import logging
from typing import Any, MutableMapping, Optional, Tuple


class SessionLogger(logging.LoggerAdapter):
    """Logger adapter that stamps ``component`` and ``session_id`` on records.

    Fields passed through ``extra`` are merged with the session fields, so
    call sites only name what is specific to the message.
    """

    def __init__(self, name: str, session_id: Optional[str] = None,
                 component: Optional[str] = None) -> None:
        super().__init__(
            logging.getLogger(name),
            {
                "component": component or name.rsplit(".", 1)[-1],
                "session_id": session_id,
            },
        )

    @property
    def component(self) -> str:
        return self.extra["component"]

    @property
    def session_id(self) -> Optional[str]:
        return self.extra["session_id"]

    def process(self, msg: Any,
                kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        kwargs["extra"] = {**self.extra, **(kwargs.get("extra") or {})}
        return msg, kwargs


def get_logger(
    name: str,
    session_id: Optional[str] = None,
    component: Optional[str] = None
) -> SessionLogger:
    """Get a session-aware logger.

    Args:
        name: Logger name (typically __name__)
        session_id: Optional identifier of the annotation session
        component: Component name, the last part of ``name`` by default
    """
    return SessionLogger(name, session_id, component)

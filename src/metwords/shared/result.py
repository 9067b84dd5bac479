"""Result objects returned by the backend collaborator.

Collaborator failures never cross into the annotation core as exceptions; they
are reported through these objects as a numeric error code or a success flag.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

# Error code reported when the request never produced an HTTP response
NETWORK_ERROR_CODE = 499


@dataclass
class FetchResult:
    """Outcome of a single backend request."""

    data: Any = None
    error_code: Union[int, bool] = False

    def __post_init__(self) -> None:
        """Validate error code."""
        if self.error_code is True:
            raise ValueError("error_code must be False or an integer status")

    @property
    def ok(self) -> bool:
        """Check whether the request succeeded."""
        return self.error_code is False

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to the message format used by ``dispatch``."""
        return {"data": self.data, "errorCode": self.error_code}


@dataclass
class QueryResult:
    """Outcome of a word lookup."""

    success: bool
    words: Optional[Any] = None
    message: Optional[str] = None

    @classmethod
    def from_fetch(cls, word: str, fetched: FetchResult) -> "QueryResult":
        """Build a lookup result from a raw fetch result."""
        if not fetched.ok:
            return cls(
                success=False,
                message=f"Failed to look up '{word}' (error code {fetched.error_code})",
            )
        if not fetched.data:
            return cls(success=False, message=f"No definition found for '{word}'")
        return cls(success=True, words=fetched.data)

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to a plain dictionary, omitting unset fields."""
        result: Dict[str, Any] = {"success": self.success}
        if self.words is not None:
            result["words"] = self.words
        if self.message is not None:
            result["message"] = self.message
        return result

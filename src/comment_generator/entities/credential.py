"""Third-party access credential."""

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class Credential:
    """A short-lived access token issued by a vendor.

    Never mutated in place: a refresh always replaces the whole value.

    Attributes:
        token: The bearer/access token
        expires_at: Unix timestamp at which the vendor stops accepting it
    """

    token: str
    expires_at: float

    def is_fresh(self, now: float, safety_margin: float) -> bool:
        """Check whether the token is still usable with ``safety_margin`` to spare."""
        return now + safety_margin < self.expires_at

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Credential":
        return cls(token=str(data["token"]), expires_at=float(data["expires_at"]))

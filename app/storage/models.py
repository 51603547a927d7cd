import enum
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from urllib.parse import quote, unquote, urlsplit


class Permission(enum.Flag):
    """Access granted by a signed URL. Members compose with ``|``."""

    READ = enum.auto()
    WRITE = enum.auto()
    LIST = enum.auto()


@dataclass(frozen=True)
class ObjectRef:
    """A blob (``name`` set) or a whole container (``name`` is None)."""

    container: str
    name: str | None = None

    @property
    def is_container(self) -> bool:
        return self.name is None

    def url(self, account_url: str) -> str:
        """Absolute, percent-encoded URL of this object under *account_url*."""
        base = f"{account_url.rstrip('/')}/{quote(self.container)}"
        if self.name is None:
            return base
        return f"{base}/{quote(self.name, safe='~/')}"

    @classmethod
    def from_url(cls, url: str, account_url: str | None = None) -> "ObjectRef":
        """Parse ``{account}/{container}/{name}`` out of a blob URL.

        Query strings (e.g. an existing signature) are ignored. When
        *account_url* carries a path prefix (storage emulators put the account
        name there) that prefix is stripped first.

        Raises:
            ValueError: if the URL has no container/name pair.
        """
        path = urlsplit(url).path
        if account_url:
            prefix = urlsplit(account_url).path.rstrip("/")
            if prefix and path.startswith(prefix + "/"):
                path = path[len(prefix):]
        parts = path.lstrip("/").split("/", 1)
        if len(parts) != 2 or not parts[0] or not parts[1]:
            raise ValueError(f"Invalid blob URL format: {url}")
        return cls(container=unquote(parts[0]), name=unquote(parts[1]))


@dataclass(frozen=True)
class SignedUrlRequest:
    """Everything needed to sign one time-bounded URL."""

    ref: ObjectRef
    permissions: Permission
    starts_on: datetime
    expires_on: datetime
    https_only: bool = True

    def __post_init__(self) -> None:
        if not self.permissions:
            raise ValueError("A signed URL needs at least one permission")
        if self.expires_on <= self.starts_on:
            raise ValueError("Signed URL expiry must be after its start")

    @property
    def validity(self) -> timedelta:
        return self.expires_on - self.starts_on

    @classmethod
    def for_window(
        cls,
        ref: ObjectRef,
        permissions: Permission,
        validity: timedelta,
        *,
        clock_skew: timedelta = timedelta(minutes=5),
        https_only: bool = True,
        now: datetime | None = None,
    ) -> "SignedUrlRequest":
        """Window from ``now - clock_skew`` to ``now + validity``."""
        current = now or datetime.now(timezone.utc)
        return cls(
            ref=ref,
            permissions=permissions,
            starts_on=current - clock_skew,
            expires_on=current + validity,
            https_only=https_only,
        )

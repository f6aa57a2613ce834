"""Connection string parsing.

Two forms are accepted::

    adwords?adwords_id=123-456-7890&access_token=...&developer_token=...
    /data/base/dir:/cache/dir:true|adwords?adwords_id=123-456-7890&...

The second form wraps the first and supplies defaults for ``database_dir``,
``cache_dir`` and ``cache``; parameters given in the query string win.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import timedelta
from urllib.parse import parse_qs, urlencode

from .errors import ConfigError, MissingAccountId, MissingDeveloperToken

API_VERSION = "v201705"
SELECTOR = "adwords"
DSN_SEP = "|"
DSN_OPT_SEP = ":"

DEFAULT_TIMEOUT = 30.0
DEFAULT_CACHE_TTL = timedelta(hours=24)

_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "μs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_DURATION_PART = re.compile(r"(\d+\.?\d*|\.\d+)(ns|us|µs|μs|ms|s|m|h)")


def parse_duration(text: str) -> timedelta:
    """Parse a Go style duration such as ``"1h30m"``, ``"250ms"`` or ``"-1.5s"``."""
    s = text.strip()
    if not s:
        raise ConfigError(f"invalid duration {text!r}")

    sign = 1.0
    if s[0] in "+-":
        sign = -1.0 if s[0] == "-" else 1.0
        s = s[1:]
    if s == "0":
        return timedelta(0)

    seconds = 0.0
    pos = 0
    while pos < len(s):
        match = _DURATION_PART.match(s, pos)
        if match is None:
            raise ConfigError(f"invalid duration {text!r}")
        seconds += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        pos = match.end()
    if pos == 0:
        raise ConfigError(f"invalid duration {text!r}")

    try:
        return timedelta(seconds=sign * seconds)
    except OverflowError:
        raise ConfigError(f"invalid duration {text!r}: out of range") from None


def parse_dsn(dsn: str) -> dict[str, str]:
    """Split the selector from its query block and return the parameters.

    Only the first value of a repeated parameter is kept.
    """
    if not dsn.startswith(SELECTOR):
        raise ConfigError(f"invalid data source name {dsn!r}: expected {SELECTOR!r} selector")

    idx = dsn.find("?")
    if idx == -1:
        raise ConfigError(f"invalid data source name {dsn!r}: query options are mandatory")

    parsed = parse_qs(dsn[idx + 1 :], keep_blank_values=True)
    return {key: values[0] for key, values in parsed.items()}


def format_duration(value: timedelta) -> str:
    """Render a timedelta in the grammar :func:`parse_duration` reads, e.g. ``"1h30m0s"``."""
    micros = value // timedelta(microseconds=1)
    if micros == 0:
        return "0s"

    sign = "-" if micros < 0 else ""
    hours, rest = divmod(abs(micros), 3_600_000_000)
    minutes, rest = divmod(rest, 60_000_000)
    seconds, rest = divmod(rest, 1_000_000)

    text = f"{hours}h" if hours else ""
    if hours or minutes:
        text += f"{minutes}m"
    if rest:
        text += f"{seconds}.{rest:06d}".rstrip("0") + "s"
    else:
        text += f"{seconds}s"
    return sign + text


def _flag(value: bool) -> str | None:
    return "1" if value else None


@dataclass(frozen=True, slots=True)
class Dsn:
    """Builds an ``adwords?...`` connection string.

    Empty fields are left out, so the parser applies its defaults::

        >>> str(Dsn("123-456-7890", access_token="ya29", developer_token="dEv"))
        'adwords?adwords_id=123-456-7890&developer_token=dEv&access_token=ya29'
    """

    adwords_id: str
    version: str = ""
    developer_token: str = ""
    access_token: str = ""
    refresh_token: str = ""
    client_id: str = ""
    client_secret: str = ""
    http_client: str = ""
    include_zero_impressions: bool = False
    skip_column_header: bool = False
    use_raw_enum_values: bool = False
    timeout: timedelta | None = None
    cache: bool = False
    cache_dir: str = ""
    cache_duration: timedelta | None = None

    def __str__(self) -> str:
        params = {
            "adwords_id": self.adwords_id,
            "version": self.version,
            "developer_token": self.developer_token,
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "http_client": self.http_client,
            "zero_impression": _flag(self.include_zero_impressions),
            "skip_column_header": _flag(self.skip_column_header),
            "raw_enum": _flag(self.use_raw_enum_values),
            "timeout": format_duration(self.timeout) if self.timeout is not None else None,
            "cache": _flag(self.cache),
            "cache_dir": self.cache_dir,
            "cache_duration": (
                format_duration(self.cache_duration) if self.cache_duration is not None else None
            ),
        }
        query = urlencode({key: value for key, value in params.items() if value})
        return f"{SELECTOR}?{query}"


@dataclass(frozen=True, slots=True)
class CachingDsn:
    """Builds the ``database_dir:cache_dir:with_cache|adwords?...`` form."""

    database_dir: str
    cache_dir: str
    src: Dsn | str
    with_cache: bool = False

    def __str__(self) -> str:
        flag = "true" if self.with_cache else "false"
        return f"{self.database_dir}{DSN_OPT_SEP}{self.cache_dir}{DSN_OPT_SEP}{flag}{DSN_SEP}{self.src}"


def _split_wrapper(dsn: str) -> tuple[dict[str, str], str]:
    """Separate the ``database_dir:cache_dir:with_cache`` prefix if present."""
    if dsn.startswith(SELECTOR) or DSN_SEP not in dsn:
        return {}, dsn

    prefix, src = dsn.split(DSN_SEP, 1)
    parts = prefix.rsplit(DSN_OPT_SEP, 2)
    if len(parts) != 3:
        raise ConfigError(
            f"invalid data source name {dsn!r}: expected database_dir:cache_dir:with_cache prefix"
        )

    database_dir, cache_dir, with_cache = parts
    if with_cache.lower() not in ("true", "false", "1", "0", ""):
        raise ConfigError(f"invalid data source name {dsn!r}: bad cache flag {with_cache!r}")

    defaults = {"database_dir": database_dir, "cache_dir": cache_dir}
    if with_cache.lower() in ("true", "1"):
        defaults["cache"] = "1"
    return defaults, src


@dataclass(frozen=True, slots=True)
class NamedClient:
    name: str


@dataclass(frozen=True, slots=True)
class StaticToken:
    access_token: str
    developer_token: str


@dataclass(frozen=True, slots=True)
class RefreshToken:
    refresh_token: str
    client_id: str
    client_secret: str
    developer_token: str


@dataclass(frozen=True, slots=True)
class NoCredentials:
    pass


CredentialSource = NamedClient | StaticToken | RefreshToken | NoCredentials


def _credential_source(values: dict[str, str]) -> CredentialSource:
    """First matching strategy wins: named client, access token, refresh token."""
    developer_token = values.get("developer_token", "")

    if name := values.get("http_client"):
        return NamedClient(name)
    if access_token := values.get("access_token"):
        if not developer_token:
            raise MissingDeveloperToken()
        return StaticToken(access_token, developer_token)
    if refresh_token := values.get("refresh_token"):
        if not developer_token:
            raise MissingDeveloperToken()
        return RefreshToken(
            refresh_token,
            values.get("client_id", ""),
            values.get("client_secret", ""),
            developer_token,
        )
    return NoCredentials()


@dataclass(frozen=True, slots=True)
class CacheSettings:
    enabled: bool = False
    directory: str = ""
    ttl: timedelta = DEFAULT_CACHE_TTL

    @classmethod
    def from_values(cls, values: dict[str, str]) -> "CacheSettings":
        directory = values.get("cache_dir", "")
        if not directory or values.get("cache") != "1":
            return cls(directory=directory)

        ttl = DEFAULT_CACHE_TTL
        if raw := values.get("cache_duration"):
            try:
                ttl = parse_duration(raw)
            except ConfigError:
                raise ConfigError(f"invalid duration {raw!r} for cache_duration") from None
            if ttl < timedelta(0):
                raise ConfigError(f"invalid duration {raw!r} for cache_duration")
            if not ttl:
                ttl = DEFAULT_CACHE_TTL
        return cls(enabled=True, directory=directory, ttl=ttl)


@dataclass(frozen=True, slots=True)
class ConnectionOptions:
    """Validated connection settings.

    ``timeout`` is in seconds and is handed to ``httpx`` as is, so it bounds
    each phase of a call (connect, write, each read, pool wait) rather than
    the whole call. A server that keeps trickling bytes can hold a report
    download open for longer than ``timeout``.
    """

    adwords_id: str
    version: str = API_VERSION
    include_zero_impressions: bool = False
    skip_column_header: bool = False
    use_raw_enum_values: bool = False
    timeout: float = DEFAULT_TIMEOUT
    cache: CacheSettings = field(default_factory=CacheSettings)
    credentials: CredentialSource = field(default_factory=NoCredentials)
    database_dir: str = ""

    def __post_init__(self) -> None:
        if not self.adwords_id:
            raise MissingAccountId()

    @classmethod
    def from_dsn(cls, dsn: str) -> "ConnectionOptions":
        """Parse and validate a connection string.

        Raises:
            ConfigError: The string is malformed or a duration is invalid.
            CredentialError: The account id or a developer token is missing.
        """
        defaults, src = _split_wrapper(dsn)
        values = {**defaults, **parse_dsn(src)}

        timeout = DEFAULT_TIMEOUT
        if raw := values.get("timeout"):
            timeout = parse_duration(raw).total_seconds()
            if timeout <= 0:
                raise ConfigError(f"invalid duration {raw!r} for timeout")

        credentials = _credential_source(values)
        adwords_id = values.get("adwords_id", "")
        if not adwords_id:
            raise MissingAccountId()

        return cls(
            adwords_id=adwords_id,
            version=values.get("version") or API_VERSION,
            include_zero_impressions=values.get("zero_impression") == "1",
            skip_column_header=values.get("skip_column_header") == "1",
            use_raw_enum_values=values.get("raw_enum") == "1",
            timeout=timeout,
            cache=CacheSettings.from_values(values),
            credentials=credentials,
            database_dir=values.get("database_dir", ""),
        )

    @property
    def identity(self) -> tuple[str, ...]:
        """Fields that shape a report result, used to key cached results."""
        return (
            self.adwords_id,
            self.version,
            str(self.include_zero_impressions),
            str(self.skip_column_header),
            str(self.use_raw_enum_values),
        )

"""Configuration loader and connection setup for htprobe."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from http.cookiejar import CookieJar, DefaultCookiePolicy
from pathlib import Path
from typing import Any, Optional

from ruamel.yaml import YAML, YAMLError

from . import APP_NAME, __version__

DEFAULT_TIMEOUT = 3
MAX_TIMEOUT = 3600
DEFAULT_AGENT = f"python-httpx ({APP_NAME} Request Analyzer v{__version__})"


@dataclass
class ProbeSettings:
    """Defaults for request and connection options."""

    agent: str = DEFAULT_AGENT
    lang: str = ""
    method: str = "GET"
    timeout: int = DEFAULT_TIMEOUT
    proxy: str = ""
    trust: bool = False
    accept_cookies: bool = False
    headers: list[str] = field(default_factory=list)
    full: bool = False
    resolve: bool = False

    def merge(self, overrides: dict[str, Any]) -> ProbeSettings:
        """Return a copy with the given (non-None) values applied."""
        data = {name: getattr(self, name) for name in KNOWN_KEYS}
        data["headers"] = list(self.headers)
        for key, value in overrides.items():
            if key in KNOWN_KEYS and value is not None:
                data[key] = value
        return ProbeSettings(**data)


@dataclass(frozen=True)
class ConnectionSetup:
    """Process-wide network policy, read-only after startup."""

    timeout: int = DEFAULT_TIMEOUT
    proxy_host: str = ""
    trust_invalid_certificates: bool = False
    follow_redirects: bool = False
    accept_cookies: bool = False
    cookie_jar: Optional[CookieJar] = None

    @classmethod
    def create(
        cls,
        timeout: int = DEFAULT_TIMEOUT,
        proxy_host: str = "",
        trust_invalid_certificates: bool = False,
        follow_redirects: bool = False,
        accept_cookies: bool = False,
    ) -> ConnectionSetup:
        """Build a setup, creating a cookie jar only when cookies are accepted."""
        if not 0 <= timeout <= MAX_TIMEOUT:
            raise ValueError(f"timeout must be between 0 and {MAX_TIMEOUT} seconds")
        return cls(
            timeout=timeout,
            proxy_host=proxy_host.strip(),
            trust_invalid_certificates=trust_invalid_certificates,
            follow_redirects=follow_redirects,
            accept_cookies=accept_cookies,
            cookie_jar=CookieJar() if accept_cookies else None,
        )

    @property
    def timeout_or_none(self) -> Optional[float]:
        """Timeout for the transport; 0 disables it."""
        return float(self.timeout) if self.timeout > 0 else None

    @property
    def proxy_url(self) -> Optional[str]:
        if not self.proxy_host:
            return None
        if "://" in self.proxy_host:
            return self.proxy_host
        return f"http://{self.proxy_host}"

    def session_jar(self) -> CookieJar:
        """Return the jar handed to the transport.

        Without cookie acceptance a jar that refuses every domain is used,
        so nothing is stored or replayed between hops.
        """
        if self.cookie_jar is not None:
            return self.cookie_jar
        return CookieJar(policy=DefaultCookiePolicy(allowed_domains=[]))


CONFIG_SEARCH_PATHS = [
    "htprobe.yaml",
    "htprobe.yml",
    ".htprobe.yaml",
    ".htprobe.yml",
]

KNOWN_KEYS = {
    "agent", "lang", "method", "timeout", "proxy",
    "trust", "accept_cookies", "headers", "full", "resolve",
}

STRING_KEYS = {"agent", "lang", "method", "proxy"}
BOOL_KEYS = {"trust", "accept_cookies", "full", "resolve"}


def find_config_path() -> Path | None:
    """Find the active config file path, or None if no config file exists."""
    for name in CONFIG_SEARCH_PATHS:
        path = Path.cwd() / name
        if path.exists():
            return path
    return None


def _read_yaml(config_path: Path) -> Any:
    yaml = YAML(typ="safe")
    with open(config_path, "r", encoding="utf-8") as f:
        data = yaml.load(f)
    if isinstance(data, dict) and "htprobe" in data:
        data = data["htprobe"]
    return data


def _check_values(data: dict[str, Any]) -> list[str]:
    """Return type errors for known keys in a config mapping."""
    errors: list[str] = []

    if "timeout" in data:
        try:
            timeout = int(data["timeout"])
        except (ValueError, TypeError):
            errors.append(f"'timeout' must be an integer, got: {data['timeout']}")
        else:
            if not 0 <= timeout <= MAX_TIMEOUT:
                errors.append(f"'timeout' must be between 0 and {MAX_TIMEOUT}")

    for key in BOOL_KEYS:
        if key in data and not isinstance(data[key], bool):
            errors.append(f"'{key}' must be true or false")

    for key in STRING_KEYS:
        if key in data and data[key] is not None and not isinstance(data[key], (str, int)):
            errors.append(f"'{key}' must be a string")

    if "headers" in data and not isinstance(data["headers"], list):
        errors.append("'headers' must be a list")

    return errors


def validate_config(config_path: Path) -> list[str]:
    """Validate a config file and return a list of error messages (empty = valid)."""
    try:
        data = _read_yaml(config_path)
    except YAMLError as e:
        return [f"Invalid YAML syntax: {e}"]
    except OSError as e:
        return [f"Cannot read file: {e}"]

    if data is None:
        return []

    if not isinstance(data, dict):
        return [f"Config must be a YAML mapping, got {type(data).__name__}"]

    errors = [f"Unknown key: '{key}'" for key in data if key not in KNOWN_KEYS]
    errors.extend(_check_values(data))
    return errors


def config_file_keys(config_path: Path) -> set[str]:
    """Return the known settings a config file sets explicitly."""
    data = _read_yaml(config_path)
    if not isinstance(data, dict):
        return set()
    return {key for key in data if key in KNOWN_KEYS}


def load_config(config_path: str | Path | None = None) -> ProbeSettings:
    """Load configuration file."""
    settings = ProbeSettings()
    explicit = config_path is not None

    if config_path is None:
        config_path = find_config_path()

    if config_path is None:
        return settings

    config_path = Path(config_path)
    if not config_path.exists():
        if explicit:
            print(f"Error: Config file not found: {config_path}", file=sys.stderr)
            sys.exit(1)
        return settings

    try:
        data = _read_yaml(config_path)
    except YAMLError as e:
        print(f"Error: Invalid YAML in {config_path}: {e}", file=sys.stderr)
        sys.exit(1)
    except OSError as e:
        print(f"Error: Cannot read config file {config_path}: {e}", file=sys.stderr)
        sys.exit(1)

    if data is None:
        return settings

    if not isinstance(data, dict):
        print(f"Error: Config must be a YAML mapping, got {type(data).__name__}", file=sys.stderr)
        sys.exit(1)

    errors = _check_values(data)
    if errors:
        for error in errors:
            print(f"Error: {error} in {config_path}", file=sys.stderr)
        sys.exit(1)

    overrides: dict[str, Any] = {}
    for key in STRING_KEYS:
        if data.get(key) is not None:
            overrides[key] = str(data[key])
    for key in BOOL_KEYS:
        if key in data:
            overrides[key] = data[key]
    if "timeout" in data:
        overrides["timeout"] = int(data["timeout"])
    if "headers" in data:
        overrides["headers"] = [str(h) for h in data["headers"]]

    return settings.merge(overrides)


def get_default_config_yaml() -> str:
    """Return default YAML config template."""
    return f'''# htprobe configuration
# Place this file as htprobe.yaml in your working directory.
# Command line options always take precedence.

htprobe:
  # User agent sent with every request
  agent: "{DEFAULT_AGENT}"

  # Accept-Language header (empty = not sent)
  lang: ""

  # Default request method
  method: GET

  # Connection timeout in seconds (0 = disabled, max {MAX_TIMEOUT})
  timeout: {DEFAULT_TIMEOUT}

  # Proxy as host[:port] (empty = direct connection)
  proxy: ""

  # Accept invalid or self-signed certificates
  trust: false

  # Store response cookies and send them on following hops
  accept_cookies: false

  # Extra request headers ('Name: Value')
  headers: []
    # - "X-Debug: 1"

  # Show values uncut
  full: false

  # Resolve host names to addresses in hop titles
  resolve: false
'''

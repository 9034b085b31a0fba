"""CLI commands for htprobe."""

from .redirects import redirects
from .headers import headers
from .cookies import cookies
from .content import content
from .certificate import certificate
from .version import version
from .config_cmd import config

# Short names accepted in place of the full command name
COMMAND_ALIASES = {
    "rd": "redirects",
    "redir": "redirects",
    "redirect": "redirects",
    "hd": "headers",
    "head": "headers",
    "ck": "cookies",
    "cookie": "cookies",
    "cnt": "content",
    "cont": "content",
    "ct": "certificate",
    "crt": "certificate",
    "cert": "certificate",
    "vers": "version",
}

__all__ = [
    "redirects",
    "headers",
    "cookies",
    "content",
    "certificate",
    "version",
    "config",
    "COMMAND_ALIASES",
]

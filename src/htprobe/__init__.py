"""htprobe - HTTP request inspector for the terminal.

Issues HTTP(S) requests, optionally follows the redirect chain and shows
headers, cookies, certificates and content of every hop.
"""

__version__ = "1.14.0"
__author__ = "Harald Leinders <harald@leinders.de>"

APP_NAME = "HtProbe"

"""Constants for pymelview library."""

from __future__ import annotations


# API Configuration
DEFAULT_BASE_URL = "https://api.melview.net/api"
DEFAULT_TIMEOUT = 30  # seconds
APP_VERSION = "5.3.1348"
USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; WOW64; rv:54.0) Gecko/20100101 Firefox/54.0"

# Service Endpoints
AUTH_SERVICE = "login.aspx"
ROOMS_SERVICE = "rooms.aspx"
COMMAND_SERVICE = "unitcommand.aspx"
CAPABILITIES_SERVICE = "unitcapabilities.aspx"

# Content Types
CONTENT_TYPE_JSON = "application/json"
CONTENT_TYPE_FORM = "application/x-www-form-urlencoded"

# Session Cookie
AUTH_COOKIE_NAME = "auth"

# Command Protocol
COMMAND_PROTOCOL_VERSION = 2
COMMAND_SEPARATOR = ","
REQUEST_LOCAL_COMMAND = 1
RESPONSE_OK = "ok"

# Local (LAN) Command Delivery
LOCAL_COMMAND_PATH = "/smart"
LOCAL_COMMAND_TIMEOUT = 5  # seconds

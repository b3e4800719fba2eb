# CFDDNS-Server
# (C) 2015-2024 Tomas Hlavacek (tmshlvck@gmail.com)
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

"""Interpretation of inbound DDNS update requests.

Nothing in here talks to Cloudflare: a request is either turned into an
UpdateRequest or rejected with RoutingMiss / BadRequest.
"""

from typing import List, Optional
import base64
import binascii
import logging
import re
from fastapi import Request
from starlette.datastructures import QueryParams

from .errors import BadRequest, RoutingMiss
from .model import Credentials, UpdateRequest
from .settings import Settings

IGNORED_PATHS = ('/favicon.ico', '/robots.txt')
UPDATE_PATH_SUFFIX = '/update'
CONTROL_CHARS_RE = re.compile(r'[\x00-\x1f\x7f]')


def require_https(request: Request):
    forwarded_proto = request.headers.get('x-forwarded-proto')
    if request.url.scheme != 'https' or forwarded_proto != 'https':
        raise BadRequest("Please use a HTTPS connection.")


def parse_basic_auth(authorization: Optional[str]) -> Credentials:
    """Decode 'Authorization: Basic <base64(username:password)>'.

    The scheme word is not checked. The decoded payload must contain a colon
    and no control characters, otherwise BadRequest is raised.
    """
    if not authorization:
        return Credentials()

    parts = authorization.split()
    if len(parts) < 2:
        raise BadRequest("Invalid authorization value.")

    try:
        decoded = base64.b64decode(parts[1], validate=True).decode('utf-8')
    except (binascii.Error, UnicodeDecodeError) as e:
        raise BadRequest("Invalid authorization value.") from e

    username, sep, password = decoded.partition(':')
    if not sep or CONTROL_CHARS_RE.search(decoded):
        raise BadRequest("Invalid authorization value.")

    return Credentials(username=username, password=password)


def split_list(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(',') if item.strip()]


def first_param(params: QueryParams, name: str) -> Optional[str]:
    """First value of a repeated query parameter, QueryParams.get returns the last"""
    values = params.getlist(name)
    return values[0] if values else None


def _relative_path(request: Request) -> str:
    path = request.scope['path']
    root_path = request.scope.get('root_path', '')
    if root_path and path.startswith(root_path):
        path = path[len(root_path):] or '/'
    return path


def interpret_request(request: Request, settings: Settings) -> Optional[UpdateRequest]:
    """Turn an inbound HTTP request into an UpdateRequest.

    Returns None for favicon/robots requests which are answered with an
    empty 204. Query parameters take precedence over the configured
    fallbacks in settings.
    """
    if settings.REQUIRE_HTTPS:
        require_https(request)

    path = _relative_path(request)
    if path in IGNORED_PATHS:
        return None

    if not path.endswith(UPDATE_PATH_SUFFIX):
        raise RoutingMiss()

    params = request.query_params
    # Unauthenticated probes get the same answer as an unknown route
    if 'Authorization' not in request.headers and 'token' not in params:
        raise RoutingMiss()

    credentials = parse_basic_auth(request.headers.get('Authorization'))

    hostnames = split_list(first_param(params, 'hostname') or first_param(params, 'host')
                           or first_param(params, 'domains'))
    ips = split_list(first_param(params, 'ips') or first_param(params, 'ip') or first_param(params, 'myip')
                     or request.headers.get(settings.CLIENT_IP_HEADER))
    if not hostnames or not ips:
        raise BadRequest("You must specify both hostname(s) and IP address(es)")

    token = credentials.password or first_param(params, 'token') or settings.DDNS_TOKEN
    if not token:
        raise BadRequest("Missing API token.")

    logging.debug(f"DYNDNS update request: {hostnames=} {ips=} basic_auth={credentials.username is not None}")
    return UpdateRequest(
        hostnames=hostnames,
        ips=ips,
        token=token,
        account_id=first_param(params, 'account') or settings.ACCOUNT_ID,
        access_group_id=first_param(params, 'group') or settings.ACCESS_GROUP_ID,
        username=credentials.username or None,
    )

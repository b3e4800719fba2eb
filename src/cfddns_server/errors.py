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

from typing import Optional
from fastapi import status


class DDNSError(Exception):
    """Base of all failures that end a DDNS update request.

    Carries the plain-text reason returned to the client and the HTTP
    status code it is returned with.
    """
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, reason: str, status_code: Optional[int] = None):
        super().__init__(reason)
        self.reason = reason
        if status_code is not None:
            self.status_code = status_code


class RoutingMiss(DDNSError):
    """Unknown route, or a known route without any credentials."""
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, reason: str = "Not Found."):
        super().__init__(reason)


class BadRequest(DDNSError):
    status_code = status.HTTP_400_BAD_REQUEST


class UpstreamError(DDNSError):
    """Any failure talking to the Cloudflare API."""


class UpstreamNotFound(UpstreamError):
    status_code = status.HTTP_404_NOT_FOUND

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

from typing import List, Optional, Protocol, Any
from enum import StrEnum
from pydantic import BaseModel, Field


class RecordType(StrEnum):
    A = 'A'
    AAAA = 'AAAA'

    @classmethod
    def for_address(cls, ip: str) -> 'RecordType':
        # Any dot means IPv4, syntax is left to the upstream API
        return cls.A if '.' in ip else cls.AAAA


class Credentials(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class UpdateRequest(BaseModel):
    hostnames: List[str] = Field(min_length=1)
    ips: List[str] = Field(min_length=1)
    token: str
    account_id: Optional[str] = None
    access_group_id: Optional[str] = None
    username: Optional[str] = None


class Zone(BaseModel):
    id: str
    name: str


class DnsRecord(BaseModel):
    id: str
    zone_id: str
    type: RecordType
    name: str
    content: str
    proxied: bool = False
    ttl: int = 1


class DNSProvider(Protocol):
    """Operations the update orchestration needs from a DNS provider."""

    async def find_zone(self, name: str) -> Zone: ...

    async def find_record(self, zone: Zone, name: str, record_type: RecordType) -> DnsRecord: ...

    async def update_record(self, record: DnsRecord, content: str) -> DnsRecord: ...

    async def update_access_group(self, account_id: str, group_id: str, ip: str) -> Any: ...

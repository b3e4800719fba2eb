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

from typing import Dict, List, Optional
import logging
import re

from .errors import DDNSError
from .model import DNSProvider, RecordType, UpdateRequest, Zone
from .metrics import ddns_updates_total, access_group_updates_total

# Last two labels of a hostname; knowingly wrong for suffixes like co.uk
REGISTRABLE_DOMAIN_RE = re.compile(r'([^.]+\.[^.]+)$')


def domain_for_hostname(hostname: str, username: Optional[str] = None) -> str:
    """Name of the zone a hostname is expected to live in.

    A client authenticated with its apex domain as the username may manage
    arbitrarily deep names below it.
    """
    if username and hostname.endswith(username):
        return username
    if m := REGISTRABLE_DOMAIN_RE.search(hostname):
        return m.group(1)
    return hostname


async def update_dns_records(client: DNSProvider, hostnames: List[str], ip: str,
                             username: Optional[str] = None):
    """Point the A or AAAA record of every hostname at ip.

    Hostnames are processed in order and the first failure aborts the rest.
    Zone lookups are cached for the duration of this call only.
    """
    record_type = RecordType.for_address(ip)
    zones: Dict[str, Zone] = {}

    for hostname in hostnames:
        try:
            domain = domain_for_hostname(hostname, username)
            if domain in zones:
                logging.debug(f"Zone cache hit {domain=} for {hostname=}")
            else:
                zones[domain] = await client.find_zone(domain)
            zone = zones[domain]

            record = await client.find_record(zone, hostname, record_type)
            logging.info(f"Updating {record_type} RR {hostname=} zone={zone.name} {record.content} -> {ip}")
            await client.update_record(record, ip)
        except DDNSError as e:
            logging.error(f"DDNS update of {hostname} to {ip} failed: {e.reason}")
            ddns_updates_total.labels(status='error', record_type=str(record_type)).inc()
            raise
        ddns_updates_total.labels(status='good', record_type=str(record_type)).inc()


async def ddns_update(client: DNSProvider, update_request: UpdateRequest) -> str:
    for ip in update_request.ips:
        await update_dns_records(client, update_request.hostnames, ip, update_request.username)

        if update_request.account_id and update_request.access_group_id:
            logging.info(f"Replacing access group {update_request.access_group_id} include list with {ip}")
            try:
                await client.update_access_group(update_request.account_id, update_request.access_group_id, ip)
            except DDNSError:
                access_group_updates_total.labels(status='error').inc()
                raise
            access_group_updates_total.labels(status='good').inc()

    return "good"

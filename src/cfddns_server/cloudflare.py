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

from typing import Dict, Optional, Any
import logging
import asyncio
import aiohttp

from .errors import UpstreamError, UpstreamNotFound
from .model import Zone, DnsRecord, RecordType
from .metrics import api_requests_total

CF_API_URL = "https://api.cloudflare.com/client/v4"


class CloudflareClient:
    """Thin adapter over the Cloudflare v4 REST API.

    Every failure, whether transport, HTTP status or an API response with
    ``success: false``, surfaces as UpstreamError carrying the upstream
    reason and status code.
    """

    def __init__(self, token: str, base_url: str = CF_API_URL, timeout: Optional[float] = None,
                 access_group_name: str = "Local IP Address"):
        self.token = token
        self.base_url = base_url.rstrip('/')
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.access_group_name = access_group_name

    async def _api_call(self, method: str, endpoint: str, params: Optional[Dict[str, str]] = None,
                        body: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.base_url}/{endpoint}"
        headers = {'Authorization': f"Bearer {self.token}", 'Content-Type': 'application/json'}
        logging.debug(f"Cloudflare API call {method} {url} {params=}")

        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.request(method, url, headers=headers, params=params, json=body) as resp:
                    status = resp.status
                    try:
                        data = await resp.json(content_type=None)
                    except ValueError:
                        data = None
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            api_requests_total.labels(method=method, status_code='error').inc()
            raise UpstreamError(str(e) or f"Cloudflare API call failed: {type(e).__name__}") from e

        api_requests_total.labels(method=method, status_code=str(status)).inc()
        logging.debug(f"Call to {method} {url} finished {status=}")

        error_status = status if status >= 400 else None
        if not isinstance(data, dict):
            raise UpstreamError(f"Invalid response from Cloudflare API (HTTP {status})", error_status)
        if error_status or not data.get('success'):
            errors = data.get('errors') or []
            message = errors[0].get('message') if errors and isinstance(errors[0], dict) else None
            raise UpstreamError(message or "Unknown API error", error_status)
        return data.get('result')

    async def find_zone(self, name: str) -> Zone:
        result = await self._api_call('GET', 'zones', params={'name': name})
        if not result:
            raise UpstreamNotFound(f"Failed to find zone '{name}'")
        return Zone.model_validate(result[0])

    async def find_record(self, zone: Zone, name: str, record_type: RecordType) -> DnsRecord:
        result = await self._api_call('GET', f'zones/{zone.id}/dns_records',
                                      params={'name': name, 'type': str(record_type)})
        for rr in result or []:
            if rr.get('name') == name and rr.get('type') == record_type:
                return DnsRecord.model_validate({**rr, 'zone_id': zone.id})
        raise UpstreamNotFound(f"Failed to find DNS record '{name}'")

    async def update_record(self, record: DnsRecord, content: str) -> DnsRecord:
        await self._api_call('PATCH', f'zones/{record.zone_id}/dns_records/{record.id}', body={
            'type': str(record.type),
            'name': record.name,
            'content': content,
            'ttl': record.ttl,
            'proxied': record.proxied,
        })
        return record.model_copy(update={'content': content})

    async def update_access_group(self, account_id: str, group_id: str, ip: str) -> Any:
        prefix = 32 if RecordType.for_address(ip) == RecordType.A else 128
        return await self._api_call('PUT', f'accounts/{account_id}/access/groups/{group_id}', body={
            'name': self.access_group_name,
            'include': [{'ip': {'ip': f"{ip}/{prefix}"}}],
        })

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
import logging
from prometheus_client import Counter, start_http_server

# Prometheus metrics
ddns_updates_total = Counter(
    'cfddns_updates_total',
    'Total number of DNS record updates',
    ['status', 'record_type']
)

access_group_updates_total = Counter(
    'cfddns_access_group_updates_total',
    'Total number of access group updates',
    ['status']
)

api_requests_total = Counter(
    'cfddns_api_requests_total',
    'Total number of Cloudflare API requests',
    ['method', 'status_code']
)


def start_metrics_server(port: Optional[int], address: str = '127.0.0.1'):
    """Serve metrics on a dedicated listener, the DDNS app exposes only /update"""
    if not port:
        logging.debug("Metrics listener disabled")
        return
    start_http_server(port, addr=address)
    logging.info(f"Prometheus metrics listening on {address}:{port}")

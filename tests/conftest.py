"""
Global pytest configuration and fixtures for CFDDNS Server tests.
"""
import pytest
import os
import base64

# Keep a developer's environment from leaking into the tested settings
for var in ('DDNS_TOKEN', 'ACCOUNT_ID', 'ACCESS_GROUP_ID', 'REQUIRE_HTTPS', 'METRICS_PORT'):
    os.environ.pop(var, None)

from cfddns_server.errors import UpstreamNotFound
from cfddns_server.model import Zone, DnsRecord, RecordType


class FakeCloudflare:
    """In-memory stand-in for CloudflareClient recording every call"""

    def __init__(self, zones, records):
        self.zones = {zone.name: zone for zone in zones}
        self.records = records
        self.calls = []
        self.tokens = []

    async def find_zone(self, name):
        self.calls.append(('find_zone', name))
        if name not in self.zones:
            raise UpstreamNotFound(f"Failed to find zone '{name}'")
        return self.zones[name]

    async def find_record(self, zone, name, record_type):
        self.calls.append(('find_record', zone.name, name, record_type))
        for record in self.records:
            if record.zone_id == zone.id and record.name == name and record.type == record_type:
                return record
        raise UpstreamNotFound(f"Failed to find DNS record '{name}'")

    async def update_record(self, record, content):
        self.calls.append(('update_record', record.name, record.type, content))
        return record.model_copy(update={'content': content})

    async def update_access_group(self, account_id, group_id, ip):
        self.calls.append(('update_access_group', account_id, group_id, ip))
        return {'id': group_id}

    def calls_of(self, operation):
        return [call for call in self.calls if call[0] == operation]


@pytest.fixture
def zones():
    return [
        Zone(id='zone-example', name='example.com'),
        Zone(id='zone-mydomain', name='mydomain.net'),
    ]


@pytest.fixture
def records():
    """A and AAAA records in example.com and mydomain.net"""
    def rr(idx, zone_id, name, rtype, content, proxied=False, ttl=1):
        return DnsRecord(id=f'rr{idx}', zone_id=zone_id, type=rtype, name=name,
                         content=content, proxied=proxied, ttl=ttl)

    return [
        rr(1, 'zone-example', 'a.example.com', RecordType.A, '192.0.2.1'),
        rr(2, 'zone-example', 'b.example.com', RecordType.A, '192.0.2.2', proxied=True, ttl=120),
        rr(3, 'zone-example', 'h.example.com', RecordType.A, '192.0.2.3'),
        rr(4, 'zone-example', 'a.example.com', RecordType.AAAA, '2001:db8::a'),
        rr(5, 'zone-mydomain', 'host.mydomain.net', RecordType.A, '192.0.2.10'),
        rr(6, 'zone-mydomain', 'deep.sub.mydomain.net', RecordType.A, '192.0.2.11'),
    ]


@pytest.fixture
def fake_cloudflare(zones, records):
    return FakeCloudflare(zones, records)


@pytest.fixture
def patched_cloudflare(monkeypatch, fake_cloudflare):
    """Make the HTTP handler use the in-memory fake instead of the real API"""
    def client_factory(token, **kwargs):
        fake_cloudflare.tokens.append(token)
        return fake_cloudflare

    monkeypatch.setattr("cfddns_server.main.CloudflareClient", client_factory)
    return fake_cloudflare


def basic_auth(username, password):
    credentials = base64.b64encode(f"{username}:{password}".encode()).decode()
    return {"Authorization": f"Basic {credentials}"}


@pytest.fixture
def auth_header():
    return basic_auth

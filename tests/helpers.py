import json
import uuid
import asyncio
from typing import List, Dict, Optional, Any

from ssi_helpers.abstract.agent import AbstractAgent
from ssi_helpers.errors.exceptions import AgentError


def match_query(doc: dict, query: Optional[dict]) -> bool:
    """Tiny subset of agent query language: equality, $in, $or"""
    for key, cond in (query or {}).items():
        if key == '$or':
            if not any(match_query(doc, q) for q in cond):
                return False
            continue
        value = doc
        for part in key.split('.'):
            value = value.get(part) if isinstance(value, dict) else None
        if isinstance(cond, dict) and '$in' in cond:
            ok = value in cond['$in']
        else:
            ok = value == cond
        if not ok:
            return False
    return True


class FakeAgent(AbstractAgent):
    """In-memory identity agent"""

    def __init__(self, name: str = 'fake', cred_defs: Dict[str, List[str]] = None):
        """
        :param cred_defs: {route tag: [cred_def_id, ...]}
        """
        self.name = name
        self.cred_defs = cred_defs or {}
        self.connections: Dict[str, dict] = {}
        self.credentials: Dict[str, dict] = {}
        self.calls: List[tuple] = []
        self.unreachable = set()
        self.wait_delay = 0
        self.fail_accept = set()
        self.fail_delete = set()
        self.fail_get_connections = 0
        self.accept_started: Optional[asyncio.Event] = None
        self.accept_gate: Optional[asyncio.Event] = None

    def add_offer(self, remote_name: str) -> str:
        connection_id = uuid.uuid4().hex
        self.connections[connection_id] = {
            'id': connection_id, 'state': 'inbound_offer', 'remote': {'name': remote_name}, 'properties': {}
        }
        return connection_id

    def add_connection(self, remote_name: str, state: str = 'connected') -> str:
        connection_id = self.add_offer(remote_name)
        self.connections[connection_id]['state'] = state
        return connection_id

    def add_credential(self, **fields) -> str:
        credential_id = uuid.uuid4().hex
        self.credentials[credential_id] = dict(id=credential_id, **fields)
        return credential_id

    def count_calls(self, method: str) -> int:
        return len([c for c in self.calls if c[0] == method])

    async def get_identity(self) -> dict:
        return {'name': self.name}

    async def create_connection(self, to: Dict[str, str], properties: Dict[str, str] = None) -> dict:
        self.calls.append(('create_connection', to, properties))
        connection_id = uuid.uuid4().hex
        self.connections[connection_id] = {
            'id': connection_id, 'state': 'outbound_offer', 'remote': dict(to), 'properties': dict(properties or {})
        }
        return dict(self.connections[connection_id])

    async def wait_for_connection(self, connection_id: str) -> dict:
        self.calls.append(('wait_for_connection', connection_id))
        if self.wait_delay:
            await asyncio.sleep(self.wait_delay)
        connection = self.connections[connection_id]
        remote = connection['remote']
        if remote.get('name') in self.unreachable or remote.get('url') in self.unreachable:
            raise AgentError(f'Connection {connection_id} was rejected', status=None, body=connection)
        connection['state'] = 'connected'
        return dict(connection)

    async def get_connections(self, filter_: Dict[str, Any] = None) -> List[dict]:
        self.calls.append(('get_connections', filter_))
        if self.fail_get_connections > 0:
            self.fail_get_connections -= 1
            raise AgentError('Service unavailable', status=503)
        return [dict(c) for c in self.connections.values() if match_query(c, filter_)]

    async def accept_connection(self, connection_id: str) -> dict:
        self.calls.append(('accept_connection', connection_id))
        if self.accept_started is not None:
            self.accept_started.set()
        if self.accept_gate is not None:
            await self.accept_gate.wait()
        if connection_id in self.fail_accept:
            raise AgentError(f'Could not accept {connection_id}', status=400)
        connection = self.connections[connection_id]
        connection['state'] = 'connected'
        return dict(connection)

    async def delete_connection(self, connection_id: str):
        self.calls.append(('delete_connection', connection_id))
        if connection_id in self.fail_delete:
            raise AgentError(f'Could not delete {connection_id}', status=500)
        self.connections.pop(connection_id, None)

    async def get_credential_definitions(
            self, filter_: Optional[Dict[str, Any]] = None, route: Optional[Dict[str, str]] = None
    ) -> dict:
        self.calls.append(('get_credential_definitions', filter_, route))
        agents = []
        for tag in (route or {}):
            ids = self.cred_defs.get(tag, [])
            agents.append({'name': tag, 'results': {'count': len(ids), 'items': [{'id': i} for i in ids]}})
        return {'agents': agents}

    async def get_credentials(self, filter_: Dict[str, Any] = None) -> List[dict]:
        return [dict(c) for c in self.credentials.values() if match_query(c, filter_)]

    async def delete_credential(self, credential_id: str):
        if credential_id in self.fail_delete:
            raise AgentError(f'Could not delete {credential_id}', status=500)
        self.credentials.pop(credential_id, None)


def write_json(path, content) -> str:
    with open(str(path), 'w') as f:
        if isinstance(content, str):
            f.write(content)
        else:
            json.dump(content, f)
    return str(path)


def make_verification(*attributes, id_: str = 'verification-1') -> dict:
    """
    :param attributes: (name, value) or (name, value, cred_def_id) tuples
    """
    items = []
    for attr in attributes:
        item = {'name': attr[0], 'value': attr[1]}
        if len(attr) > 2:
            item['cred_def_id'] = attr[2]
        items.append(item)
    return {'id': id_, 'info': {'attributes': items}}


def lei_record(lei: str = '5493001KJTIIGC8Y1R12', region: bool = True, additional: bool = True) -> dict:
    address = {
        'FirstAddressLine': {'$': '731 Lexington Avenue'},
        'City': {'$': 'New York'},
        'PostalCode': {'$': '10022'},
        'Country': {'$': 'US'},
    }
    if additional:
        address['AdditionalAddressLine'] = [{'$': 'Floor 3'}, {'$': 'Suite 7'}]
    if region:
        address['Region'] = {'$': 'US-NY'}
    return {
        'LEI': {'$': lei},
        'Entity': {
            'LegalName': {'$': 'Bloomberg Finance L.P.'},
            'LegalAddress': address,
        }
    }

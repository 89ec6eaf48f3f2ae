import json
import asyncio
import logging
from typing import Optional, List, Dict, Any

import aiohttp

from ssi_helpers.abstract.agent import AbstractAgent
from ssi_helpers.agent.transport import http_request
from ssi_helpers.errors.exceptions import AgentError, ConfigurationError


logger = logging.getLogger(__name__)


class CloudAgent(AbstractAgent):
    """Hosted identity-agent accessed over REST API

    Every call is authorized with agent name and password (HTTP basic auth)
    """

    API_PATH = '/api/v1/'
    IO_TIMEOUT = 30
    WAIT_RETRIES = 30
    WAIT_INTERVAL = 3.0

    def __init__(
            self, account_url: str, agent_name: str, agent_password: str,
            label: str = None, timeout: float = IO_TIMEOUT
    ):
        """
        :param account_url: url of agent account service
        :param agent_name: agent name, used as login
        :param agent_password: agent password
        :param label: printable label for logs
        :param timeout: IO timeout in sec
        """
        for name, value in (('account_url', account_url), ('agent_name', agent_name), ('agent_password', agent_password)):
            if not value or type(value) is not str:
                raise ConfigurationError('Invalid "%s" for CloudAgent' % name)
        self.__base_url = account_url.rstrip('/') + self.API_PATH
        self.__name = agent_name
        self.__auth = aiohttp.BasicAuth(agent_name, agent_password)
        self.__label = label or agent_name
        self.__timeout = timeout

    @property
    def name(self) -> str:
        return self.__name

    @property
    def label(self) -> str:
        return self.__label

    @property
    def timeout(self) -> float:
        return self.__timeout

    @timeout.setter
    def timeout(self, value: float):
        if value is None or value > 0:
            self.__timeout = value
        else:
            raise ConfigurationError('Timeout must be > 0')

    async def get_identity(self) -> dict:
        return await self.__call('GET', 'info')

    async def create_connection(self, to: Dict[str, str], properties: Dict[str, str] = None) -> dict:
        logger.debug(f'[{self.label}] Creating connection to {to}')
        return await self.__call('POST', 'connections', json_={'to': to, 'properties': properties or {}})

    async def get_connection(self, connection_id: str) -> dict:
        return await self.__call('GET', f'connections/{connection_id}')

    async def wait_for_connection(
            self, connection_id: str, retries: int = WAIT_RETRIES, retry_interval: float = WAIT_INTERVAL
    ) -> dict:
        for attempt in range(retries):
            connection = await self.get_connection(connection_id)
            state = connection.get('state')
            logger.debug(f'[{self.label}] Connection {connection_id} state: {state} (attempt {attempt + 1})')
            if state == 'connected':
                return connection
            elif state == 'rejected':
                raise AgentError(f'Connection {connection_id} was rejected', body=connection)
            await asyncio.sleep(retry_interval)
        raise asyncio.TimeoutError(f'Connection {connection_id} was not established after {retries} attempts')

    async def get_connections(self, filter_: Dict[str, Any] = None) -> List[dict]:
        return self.__items(await self.__call('GET', 'connections', params=self.__query(filter_)))

    async def accept_connection(self, connection_id: str) -> dict:
        return await self.__call('PATCH', f'connections/{connection_id}', json_={'state': 'connected'})

    async def delete_connection(self, connection_id: str):
        await self.__call('DELETE', f'connections/{connection_id}')

    async def get_credential_definitions(
            self, filter_: Optional[Dict[str, Any]] = None, route: Optional[Dict[str, str]] = None
    ) -> dict:
        params = self.__query(filter_)
        if route:
            params['route'] = ','.join(f'{key}:{value}' for key, value in route.items())
        return await self.__call('GET', 'credential_definitions', params=params)

    async def get_credentials(self, filter_: Dict[str, Any] = None) -> List[dict]:
        return self.__items(await self.__call('GET', 'credentials', params=self.__query(filter_)))

    async def delete_credential(self, credential_id: str):
        await self.__call('DELETE', f'credentials/{credential_id}')

    async def __call(self, method: str, path: str, params: dict = None, json_: Any = None) -> Any:
        url = self.__base_url + path
        try:
            status, body = await http_request(
                method, url, timeout=self.__timeout, auth=self.__auth, params=params, json_=json_
            )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise AgentError(f'{method} {url} failed: {e!r}') from e
        if 200 <= status < 300:
            return body
        raise AgentError(f'{method} {url} returned status {status}', status=status, body=body)

    @staticmethod
    def __query(filter_: Optional[Dict[str, Any]]) -> dict:
        return {'filter': json.dumps(filter_)} if filter_ else {}

    @staticmethod
    def __items(body: Any) -> List[dict]:
        if isinstance(body, dict):
            return body.get('items', [])
        return body or []

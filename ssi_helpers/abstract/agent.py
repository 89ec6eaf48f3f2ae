from abc import ABC, abstractmethod
from typing import Optional, List, Dict, Any


class AbstractAgent(ABC):
    """Narrow capability surface of the hosted identity-agent

    Connections, credentials and credential definitions are plain dicts
    as returned by the agent service.
    """

    @abstractmethod
    async def get_identity(self) -> dict:
        raise NotImplemented

    @abstractmethod
    async def create_connection(self, to: Dict[str, str], properties: Dict[str, str] = None) -> dict:
        """Send connection offer

        :param to: {'name': <agent name>} or {'url': <agent url>}
        :param properties: tags attached to the connection on our side
        :return: connection offer, has "id" attribute
        """
        raise NotImplemented

    @abstractmethod
    async def wait_for_connection(self, connection_id: str) -> dict:
        raise NotImplemented

    @abstractmethod
    async def get_connections(self, filter_: Dict[str, Any] = None) -> List[dict]:
        raise NotImplemented

    @abstractmethod
    async def accept_connection(self, connection_id: str) -> dict:
        raise NotImplemented

    @abstractmethod
    async def delete_connection(self, connection_id: str):
        raise NotImplemented

    @abstractmethod
    async def get_credential_definitions(
            self, filter_: Optional[Dict[str, Any]] = None, route: Optional[Dict[str, str]] = None
    ) -> dict:
        """Lookup credential definitions of own agent or agents reachable by route

        :param filter_: query on credential definition fields
        :param route: connection tags, for example {'trustedLEIIssuer': 'true'}
        :return: {'agents': [{'results': {'items': [{'id': ...}]}}]}
        """
        raise NotImplemented

    @abstractmethod
    async def get_credentials(self, filter_: Dict[str, Any] = None) -> List[dict]:
        raise NotImplemented

    @abstractmethod
    async def delete_credential(self, credential_id: str):
        raise NotImplemented

import asyncio
import logging
from typing import Optional, List

import aiohttp

from ssi_helpers.agent.transport import http_request
from ssi_helpers.errors.exceptions import LeiLookupError, LookupTransportError


logger = logging.getLogger(__name__)


def lei_record_to_user_record(lei_info: dict) -> dict:
    """Map GLEIF record fields to canonical user record fields"""
    try:
        address = lei_info['Entity']['LegalAddress']
        user_record = {
            'LEI': lei_info['LEI']['$'],
            'company_name': lei_info['Entity']['LegalName']['$'],
            'address_line_1': address['FirstAddressLine']['$'],
        }
        additional = address.get('AdditionalAddressLine')
        if additional:
            user_record['address_line_2'] = additional[0]['$']
        user_record['city'] = address['City']['$']
        user_record['state'] = address['Region']['$'] if address.get('Region') else '-'
        user_record['zip_code'] = address['PostalCode']['$']
        user_record['country'] = address['Country']['$']
    except (KeyError, IndexError, TypeError) as e:
        raise LeiLookupError(f'Malformed LEI record: missing {e}') from e
    return user_record


class LeiRegistry:
    """Client of public LEI lookup service
    """

    DEFAULT_URL = 'https://leilookup.gleif.org/api/v2/leirecords'
    IO_TIMEOUT = 30

    def __init__(self, url: str = DEFAULT_URL, timeout: float = IO_TIMEOUT):
        self.__url = url
        self.__timeout = timeout

    @property
    def url(self) -> str:
        return self.__url

    @property
    def timeout(self) -> float:
        return self.__timeout

    async def lookup(self, lei_number: str) -> List[dict]:
        try:
            status, body = await http_request(
                'GET', self.__url, timeout=self.__timeout, params={'lei': lei_number}
            )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.debug(f'Failed to find LEI info for {lei_number}: {e!r}')
            raise LookupTransportError(f'LEI lookup for {lei_number} failed: {e!r}') from e
        if status != 200:
            raise LookupTransportError(f'LEI lookup for {lei_number} returned status {status}')
        logger.info(f'Found LEI info for: {lei_number}: {body}')
        if not isinstance(body, list):
            raise LeiLookupError(f'LEI search for {lei_number} returned unexpected data')
        return body

    async def build_user_record(self, lei_number: str) -> Optional[dict]:
        """User record from the only registry record matching LEI number
        """
        if not lei_number:
            return None
        records = await self.lookup(lei_number)
        # only one lei_number in the search
        if len(records) != 1:
            raise LeiLookupError(f'LEI search for {lei_number} returned {len(records)} records, expected 1')
        return lei_record_to_user_record(records[0])


async def build_user_record_from_lei(lei_number: str, registry: LeiRegistry = None) -> Optional[dict]:
    registry = registry or LeiRegistry()
    return await registry.build_user_record(lei_number)

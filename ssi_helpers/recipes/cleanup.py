import logging

from ssi_helpers.abstract.agent import AbstractAgent
from ssi_helpers.errors.exceptions import AgentError, ConfigurationError


logger = logging.getLogger(__name__)


async def delete_connections(from_agent: AbstractAgent, to_agent: AbstractAgent) -> int:
    """Delete connections of from_agent that lead to to_agent

    :return: count of deleted connections
    """
    if not from_agent or not to_agent:
        raise ConfigurationError('need to provide from_agent and to_agent to delete_connections')
    to_name = (await to_agent.get_identity())['name']
    from_name = (await from_agent.get_identity())['name']
    logger.info(f'Deleting {to_name} connections from {from_name}')
    connections = await from_agent.get_connections({'remote.name': to_name})
    return await _delete_each(connections, from_agent.delete_connection, 'connection')


async def delete_all_connections(agent: AbstractAgent) -> int:
    if not agent:
        raise ConfigurationError('need to provide agent to delete_all_connections')
    logger.info(f'Deleting all connections from {(await agent.get_identity())["name"]}')
    return await _delete_each(await agent.get_connections(), agent.delete_connection, 'connection')


async def delete_all_credentials(agent: AbstractAgent) -> int:
    if not agent:
        raise ConfigurationError('need to provide agent to delete_all_credentials')
    logger.info(f'Deleting all credentials from {(await agent.get_identity())["name"]}')
    return await _delete_each(await agent.get_credentials(), agent.delete_credential, 'credential')


async def _delete_each(items: list, delete, kind: str) -> int:
    items = items or []
    logger.info(f'{len(items)} {kind}s to delete')
    deleted = 0
    for item in items:
        logger.debug(f'Deleting {kind} {item["id"]}')
        try:
            await delete(item['id'])
        except AgentError as e:
            logger.error(f'Error when deleting {kind} {item["id"]}: {e}')
        else:
            deleted += 1
    return deleted

import pytest

from ssi_helpers.errors.exceptions import ConfigurationError
from ssi_helpers.recipes import delete_connections, delete_all_connections, delete_all_credentials

from .helpers import FakeAgent


@pytest.mark.asyncio
async def test_delete_connections_between_agents():
    holder = FakeAgent('holder')
    issuer = FakeAgent('issuer')
    to_issuer1 = holder.add_connection('issuer')
    to_issuer2 = holder.add_connection('issuer', state='outbound_offer')
    to_other = holder.add_connection('other')

    deleted = await delete_connections(holder, issuer)
    assert deleted == 2
    assert to_issuer1 not in holder.connections
    assert to_issuer2 not in holder.connections
    assert to_other in holder.connections
    assert ('get_connections', {'remote.name': 'issuer'}) in holder.calls


@pytest.mark.asyncio
async def test_delete_all_connections_skips_failures():
    agent = FakeAgent('holder')
    ids = [agent.add_connection('a'), agent.add_connection('b'), agent.add_offer('c')]
    agent.fail_delete.add(ids[1])

    assert await delete_all_connections(agent) == 2
    assert list(agent.connections.keys()) == [ids[1]]


@pytest.mark.asyncio
async def test_delete_all_credentials():
    agent = FakeAgent('holder')
    agent.add_credential(schema_name='lei', state='issued')
    stuck = agent.add_credential(schema_name='tys', state='issued')
    agent.fail_delete.add(stuck)

    assert await delete_all_credentials(agent) == 1
    assert list(agent.credentials.keys()) == [stuck]
    assert await delete_all_credentials(FakeAgent('empty')) == 0


@pytest.mark.asyncio
async def test_agents_required():
    with pytest.raises(ConfigurationError):
        await delete_connections(FakeAgent(), None)
    with pytest.raises(ConfigurationError):
        await delete_all_connections(None)
    with pytest.raises(ConfigurationError):
        await delete_all_credentials(None)

import asyncio
import logging
from typing import Optional, Union

from ssi_helpers.errors.exceptions import ConfigurationError, InvalidIntervalError, PollingError


logger = logging.getLogger(__name__)


def check_interval(interval) -> Union[int, float]:
    if type(interval) not in (int, float) or not interval >= 0:
        raise InvalidIntervalError('ConnectionResponder interval must be >= 0')
    return interval


class ConnectionResponder:
    """Listens for and accepts incoming connection offers

    Signup helpers of other apps set up connections to this agent to look up
    its credential definitions, so trusted issuers run one of these.
    Every iteration is scheduled by timer, stop takes effect on iteration boundary.
    """

    DEF_INTERVAL = 3000  # msec

    def __init__(self, agent, interval: Union[int, float] = None):
        """
        :param agent: agent with get_connections/accept_connection/delete_connection
        :param interval: (optional) polling interval in msec
        """
        if agent is None or not callable(getattr(agent, 'get_connections', None)):
            raise ConfigurationError('Invalid agent for ConnectionResponder')
        self.__agent = agent
        self.__interval = self.DEF_INTERVAL if interval is None else check_interval(interval)
        self.__stopped = True
        self.__loop: Optional[asyncio.AbstractEventLoop] = None
        self.__timer: Optional[asyncio.TimerHandle] = None
        self.__task: Optional[asyncio.Task] = None
        self.__last_error: Optional[PollingError] = None

    @property
    def interval(self) -> Union[int, float]:
        return self.__interval

    @property
    def is_running(self) -> bool:
        return not self.__stopped

    @property
    def last_error(self) -> Optional[PollingError]:
        return self.__last_error

    def set_interval(self, interval: Union[int, float]):
        self.__interval = check_interval(interval)

    async def start(self):
        """Start polling, an iteration left running by stop() re-arms the timer once done"""
        if not self.__stopped:
            return
        self.__stopped = False
        self.__loop = asyncio.get_running_loop()
        if not self.__in_flight:
            self.__arm(0)

    async def stop(self):
        """Stop polling, iteration in progress is not interrupted"""
        self.__stopped = True
        if self.__timer is not None:
            self.__timer.cancel()
            self.__timer = None

    async def join(self):
        """Wait for iteration in progress"""
        if self.__task is not None and not self.__task.done():
            await asyncio.wait([self.__task])

    async def respond_once(self) -> Optional[dict]:
        """Accept first inbound connection offer, delete it if accept fails

        :return: accepted connection if any
        """
        try:
            offers = await self.__agent.get_connections({'state': 'inbound_offer'})
        except Exception as e:
            self.__fail(PollingError(f'Failed to respond to connection requests: {e!r}'))
            return None
        logger.info(f'Connection Offers: {len(offers)}')
        if not offers:
            return None

        offer = offers[0]
        offer_id = offer.get('id')
        try:
            logger.info(f'Accepting connection offer {offer_id} from {(offer.get("remote") or {}).get("name")}')
            connection = await self.__agent.accept_connection(offer_id)
            logger.info(f'Accepted connection offer {offer_id} from {(connection.get("remote") or {}).get("name")}')
            return connection
        except Exception as e:
            self.__fail(PollingError(f"Couldn't accept connection offer: {e!r}", offer_id=offer_id))
        try:
            logger.info(f'Deleting bad connection offer {offer_id}')
            await self.__agent.delete_connection(offer_id)
        except Exception as e:
            self.__fail(PollingError(f'Failed to delete connection offer: {e!r}', offer_id=offer_id))
        return None

    def __fail(self, error: PollingError):
        self.__last_error = error
        logger.error(str(error))

    @property
    def __in_flight(self) -> bool:
        return self.__task is not None and not self.__task.done()

    def __arm(self, delay: Union[int, float]):
        # single pending timer at most
        if self.__timer is not None:
            self.__timer.cancel()
            self.__timer = None
        if self.__stopped:
            return
        self.__timer = self.__loop.call_later(delay / 1000, self.__fire)

    def __fire(self):
        self.__timer = None
        if self.__stopped or self.__in_flight:
            return
        self.__task = self.__loop.create_task(self.respond_once())
        self.__task.add_done_callback(self.__on_iteration_done)

    def __on_iteration_done(self, task: asyncio.Task):
        if not task.cancelled() and task.exception() is not None:
            self.__fail(PollingError(f'Connection responder iteration crashed: {task.exception()!r}'))
        self.__arm(self.__interval)

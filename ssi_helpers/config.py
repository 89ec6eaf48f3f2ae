import os
import logging
from dataclasses import dataclass
from typing import Optional, Mapping, Union

from ssi_helpers.abstract.helpers import ProofHelper
from ssi_helpers.agent.cloud import CloudAgent
from ssi_helpers.errors.exceptions import ConfigurationError
from ssi_helpers.proofs.login import LoginHelper, NullProofHelper
from ssi_helpers.registry.lei import LeiRegistry
from ssi_helpers.responder import ConnectionResponder, check_interval


TRUE_VALUES = ('true', '1', 'yes', 'on')


def _as_bool(value: Optional[str], default: bool = False) -> bool:
    if value is None or value == '':
        return default
    return value.strip().lower() in TRUE_VALUES


def _as_number(name: str, value: Optional[str]) -> Optional[float]:
    if value is None or value == '':
        return None
    try:
        number = float(value)
    except ValueError:
        raise ConfigurationError(f'"{name}" must be a number, got "{value}"')
    return int(number) if number.is_integer() else number


class Config:

    @dataclass
    class CloudOpts:
        account_url: str = None
        agent_name: str = None
        agent_password: str = None
        io_timeout: float = None

        @property
        def is_filled(self) -> bool:
            return self.account_url is not None and self.agent_name is not None and self.agent_password is not None

    @dataclass
    class LoginOpts:
        proof_schema_path: str = None
        pass_null_proofs: bool = False

    @dataclass
    class ResponderOpts:
        enabled: bool = False
        interval: Union[int, float] = ConnectionResponder.DEF_INTERVAL

    @dataclass
    class RegistryOpts:
        lei_lookup_url: str = LeiRegistry.DEFAULT_URL
        timeout: float = LeiRegistry.IO_TIMEOUT

    def __init__(self):
        self.__cloud_opts = self.CloudOpts()
        self.__login_opts = self.LoginOpts()
        self.__responder_opts = self.ResponderOpts()
        self.__registry_opts = self.RegistryOpts()
        self.__log_level = 'info'

    @property
    def cloud_opts(self) -> CloudOpts:
        return self.__cloud_opts

    @property
    def login_opts(self) -> LoginOpts:
        return self.__login_opts

    @property
    def responder_opts(self) -> ResponderOpts:
        return self.__responder_opts

    @property
    def registry_opts(self) -> RegistryOpts:
        return self.__registry_opts

    @property
    def log_level(self) -> str:
        return self.__log_level

    def setup_cloud(
            self, account_url: str = None, agent_name: str = None, agent_password: str = None,
            io_timeout: float = None
    ) -> "Config":
        if not account_url:
            raise ConfigurationError('"account_url" must be set')
        if not agent_name:
            raise ConfigurationError('"agent_name" must be set')
        if not agent_password:
            raise ConfigurationError('"agent_password" must be set')
        if io_timeout is not None and io_timeout <= 0:
            raise ConfigurationError('"io_timeout" must be > 0')
        self.__cloud_opts = self.CloudOpts(
            account_url=account_url, agent_name=agent_name, agent_password=agent_password, io_timeout=io_timeout
        )
        return self

    def setup_login(self, proof_schema_path: str = None, pass_null_proofs: bool = False) -> "Config":
        self.__login_opts = self.LoginOpts(proof_schema_path=proof_schema_path, pass_null_proofs=pass_null_proofs)
        return self

    def setup_responder(self, enabled: bool = True, interval: Union[int, float] = None) -> "Config":
        if interval is None:
            interval = ConnectionResponder.DEF_INTERVAL
        self.__responder_opts = self.ResponderOpts(enabled=enabled, interval=check_interval(interval))
        return self

    def setup_registry(self, lei_lookup_url: str = None, timeout: float = None) -> "Config":
        self.__registry_opts = self.RegistryOpts(
            lei_lookup_url=lei_lookup_url or LeiRegistry.DEFAULT_URL,
            timeout=timeout or LeiRegistry.IO_TIMEOUT
        )
        return self

    def setup_logging(self, level: str) -> "Config":
        if logging.getLevelName(level.upper()) not in range(0, 100):
            raise ConfigurationError(f'Unknown log level "{level}"')
        self.__log_level = level.lower()
        return self

    def configure_logging(self):
        logging.basicConfig(
            level=self.__log_level.upper(),
            format='%(asctime)s %(levelname)s [%(name)s] %(message)s'
        )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] = None) -> "Config":
        """Configuration of demo app from environment variables"""
        env = os.environ if environ is None else environ
        cfg = cls()
        if env.get('ACCOUNT_URL') or env.get('AGENT_NAME') or env.get('AGENT_PASSWORD'):
            cfg.setup_cloud(
                account_url=env.get('ACCOUNT_URL'),
                agent_name=env.get('AGENT_NAME'),
                agent_password=env.get('AGENT_PASSWORD'),
                io_timeout=_as_number('AGENT_IO_TIMEOUT', env.get('AGENT_IO_TIMEOUT'))
            )
        cfg.setup_login(
            proof_schema_path=env.get('LOGIN_PROOF_PATH') or None,
            pass_null_proofs=_as_bool(env.get('NULL_PROOFS_PASS'))
        )
        cfg.setup_responder(
            enabled=_as_bool(env.get('ACCEPT_INCOMING_CONNECTIONS')),
            interval=_as_number('CONNECTION_POLL_INTERVAL', env.get('CONNECTION_POLL_INTERVAL'))
        )
        cfg.setup_registry(lei_lookup_url=env.get('LEI_LOOKUP_URL') or None)
        cfg.setup_logging(env.get('AGENT_LOG_LEVEL') or 'info')
        return cfg


def make_agent(config: Config) -> CloudAgent:
    opts = config.cloud_opts
    if not opts.is_filled:
        raise ConfigurationError('Cloud agent is not configured')
    kwargs = {'timeout': opts.io_timeout} if opts.io_timeout else {}
    return CloudAgent(opts.account_url, opts.agent_name, opts.agent_password, **kwargs)


def make_login_helper(config: Config) -> ProofHelper:
    """Static proof schema login if proof path configured, else null proofs"""
    opts = config.login_opts
    if opts.proof_schema_path:
        return LoginHelper(opts.proof_schema_path)
    return NullProofHelper(opts.pass_null_proofs)


def make_responder(config: Config, agent) -> Optional[ConnectionResponder]:
    opts = config.responder_opts
    if not opts.enabled:
        return None
    return ConnectionResponder(agent, opts.interval)


def make_registry(config: Config) -> LeiRegistry:
    opts = config.registry_opts
    return LeiRegistry(opts.lei_lookup_url, opts.timeout)

import uuid
import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, List, Dict, Union, Sequence, Tuple

from ssi_helpers.abstract.helpers import SignupHelper
from ssi_helpers.errors.exceptions import *
from ssi_helpers.proofs.login import get_attributes
from ssi_helpers.proofs.templates import TemplateCell, check_template_path, unique_version
from ssi_helpers.registry.lei import LeiRegistry


logger = logging.getLogger(__name__)


# Trusted issuer roles
LEI = 'lei'
GLEIF = 'gleif'
TYS = 'tys'
IFT_FOUNDER = 'iftfounder'

TRUST_TAGS = {
    LEI: 'trustedLEIIssuer',
    GLEIF: 'trustedGLEIF',
    TYS: 'trustedTYSIssuer',
    IFT_FOUNDER: 'trustedIFTFounderIssuer',
}

# Requested attribute key markers, first match wins
LEI_ISSUER_MARKERS = (
    ('_lei', LEI),
    ('_gleif', GLEIF),
)
IFT_NETWORK_MARKERS = (
    ('tys', TYS),
    ('ift', IFT_FOUNDER),
    ('lei', LEI),
)

DEFAULT_SCHEMA = 'default'
LEI_SCHEMA = 'lei'


def issuer_role_for_key(key: str, markers: Sequence[Tuple[str, str]]) -> Optional[str]:
    key = key.lower()
    for marker, role in markers:
        if marker in key:
            return role
    return None


@dataclass
class TrustedIssuer:
    """Issuer whose credential definitions restrict proof requests

    :param role: issuer role, referenced by key markers
    :param issuer: agent name or url
    :param tag: connection tag used to route credential definitions lookup
    """
    role: str
    issuer: str
    tag: str = None

    def __post_init__(self):
        if not self.issuer or type(self.issuer) is not str:
            raise ConfigurationError(f'Invalid {self.role} issuer')
        if self.tag is None:
            self.tag = TRUST_TAGS.get(self.role)
        if not self.tag:
            raise ConfigurationError(f'No trust tag for {self.role} issuer')

    @property
    def target(self) -> Dict[str, str]:
        if 'http' in self.issuer.lower():
            return {'url': self.issuer}
        else:
            return {'name': self.issuer}


class AnyOf:
    """Requirement met when every field of at least one alternative is present"""

    def __init__(self, *alternatives: Sequence[str]):
        if not alternatives or not all(alternatives):
            raise ConfigurationError('AnyOf expects non-empty alternatives')
        self.alternatives = [list(alt) for alt in alternatives]

    def missing(self, attributes: dict) -> Optional[str]:
        first_missing = None
        for alt in self.alternatives:
            absent = [field for field in alt if not attributes.get(field)]
            if not absent:
                return None
            if first_missing is None:
                first_missing = absent[0]
        return first_missing

    def __str__(self):
        return ' or '.join('+'.join(alt) for alt in self.alternatives)


Requirement = Union[str, AnyOf]

LEI_REQUIRED_FIELDS: List[Requirement] = ['lei']
IFT_NETWORK_REQUIRED_FIELDS: List[Requirement] = [
    'company_name',
    'address_line_1', 'address_line_2', 'state', 'zip_code', 'city', 'country',
    'supplier_identifier', 'supplier_rating', 'supplier_since',
    AnyOf(['lei'], ['tys_identifier', 'trust_value', 'member_since']),
]
IFT_NETWORK_RECORD_FIELDS = [
    'company_name', 'address_line_1', 'address_line_2', 'city', 'state', 'zip_code', 'country', 'tax_id',
    'supplier_identifier', 'supplier_rating', 'supplier_since', 'tys_identifier', 'trust_value', 'member_since',
    'lei'
]


def missing_field(requirement: Requirement, attributes: dict) -> Optional[str]:
    if isinstance(requirement, AnyOf):
        return requirement.missing(attributes)
    return None if attributes.get(requirement) else requirement


def check_verification_id(verification: dict):
    if not isinstance(verification, dict) or not verification.get('id'):
        raise InvalidVerificationError('Invalid verification')


class AccountSignupHelper(SignupHelper):
    """Builds proof requests restricted to credentials of trusted issuers

    Signup apps set up tagged connections to trusted issuers to look up their
    credential definitions, then verified attributes become user record.
    """

    SETUP_TIMEOUT = 60
    AGENT_CAPABILITIES = (
        'create_connection', 'wait_for_connection', 'get_connections', 'delete_connection',
        'get_credential_definitions'
    )

    def __init__(
            self, issuers: List[TrustedIssuer], schemas: Union[str, Dict[str, str]], agent,
            markers: Sequence[Tuple[str, str]] = IFT_NETWORK_MARKERS,
            required_fields: List[Requirement] = None, record_fields: List[str] = None,
            member_identifier: bool = True, setup_timeout: float = SETUP_TIMEOUT
    ):
        """
        :param issuers: trusted issuers, connections are set up in the given order
        :param schemas: path to proof schema file or {schema name: path}, "default" is required
        :param agent: agent capable of looking up credential definitions
        :param markers: ordered (marker, role) pairs matched against requested attribute keys
        :param required_fields: fields that must be proven by credentials
        :param record_fields: user record fields, all proof attributes if None
        :param member_identifier: add fresh member_identifier to user records
        :param setup_timeout: seconds to wait for every issuer connection
        """
        if not issuers or not all(isinstance(issuer, TrustedIssuer) for issuer in issuers):
            raise ConfigurationError('Invalid trusted issuers')
        roles = {issuer.role for issuer in issuers}
        for marker, role in markers:
            if role not in roles:
                raise ConfigurationError(f'Marker "{marker}" refers to unknown issuer role "{role}"')
        if type(schemas) is str:
            schemas = {DEFAULT_SCHEMA: schemas}
        if not isinstance(schemas, dict) or DEFAULT_SCHEMA not in schemas:
            raise ConfigurationError('Invalid proof schema path for signup helper')
        if agent is None or not all(callable(getattr(agent, cap, None)) for cap in self.AGENT_CAPABILITIES):
            raise ConfigurationError('Invalid agent')
        self.__issuers = list(issuers)
        self.__cells = {name: TemplateCell(check_template_path(path)) for name, path in schemas.items()}
        self.__agent = agent
        self.__markers = tuple(markers)
        self.__required_fields = list(required_fields or [])
        self.__record_fields = list(record_fields) if record_fields is not None else None
        self.__member_identifier = member_identifier
        self.__setup_timeout = setup_timeout

    @property
    def issuers(self) -> List[TrustedIssuer]:
        return list(self.__issuers)

    @property
    def agent(self):
        return self.__agent

    @property
    def markers(self) -> Tuple[Tuple[str, str], ...]:
        return self.__markers

    @classmethod
    def for_ift_network(
            cls, tys_issuer: str, lei_issuer: str, iftfounder_issuer: str,
            proof_schema_path_tys: str, proof_schema_path_lei: str, agent, **kwargs
    ) -> "AccountSignupHelper":
        """Proof requests asking for TYS or LEI credential and IFT Founder supplier ID"""
        return cls(
            issuers=[
                TrustedIssuer(IFT_FOUNDER, iftfounder_issuer),
                TrustedIssuer(TYS, tys_issuer),
                TrustedIssuer(LEI, lei_issuer),
            ],
            schemas={DEFAULT_SCHEMA: proof_schema_path_tys, LEI_SCHEMA: proof_schema_path_lei},
            agent=agent,
            markers=IFT_NETWORK_MARKERS,
            required_fields=IFT_NETWORK_REQUIRED_FIELDS,
            record_fields=IFT_NETWORK_RECORD_FIELDS,
            **kwargs
        )

    async def setup(self):
        """Set up tagged connections to trusted issuers so their credential definitions
        can be routed by tag later
        """
        for issuer in self.__issuers:
            to = issuer.target
            logger.info(f'Setting up a connection to trusted issuer: {to}')
            try:
                offer = await self.__agent.create_connection(to, {issuer.tag: 'true'})
                await asyncio.wait_for(
                    self.__agent.wait_for_connection(offer['id']), timeout=self.__setup_timeout
                )
            except asyncio.TimeoutError as e:
                raise SetupError(f'Connection to {issuer.role} issuer {issuer.issuer} was not confirmed in time') from e
            except (AgentError, KeyError, TypeError) as e:
                raise SetupError(f'Connection to {issuer.role} issuer {issuer.issuer} failed: {e}') from e
            logger.info(f'Connection {offer["id"]} established')

    async def cleanup(self) -> int:
        """Delete all connections created for this signup flow
        """
        names = [issuer.issuer for issuer in self.__issuers]
        logger.info(f'Cleaning up connections to the issuers: {", ".join(names)}')
        connections = await self.__agent.get_connections({
            '$or': [
                {'remote.name': {'$in': names}},
                {'remote.url': {'$in': names}},
            ]
        })
        logger.info(f'Cleaning up {len(connections)} issuer connections')
        for connection in connections:
            logger.debug(f'Cleaning up connection {connection["id"]}')
            await self.__agent.delete_connection(connection['id'])
        return len(connections)

    async def get_restrictions(self) -> Dict[str, List[dict]]:
        """Credential definition restrictions of every trusted issuer by role"""
        restrictions = await asyncio.gather(*[self.__issuer_restrictions(issuer) for issuer in self.__issuers])
        return {issuer.role: items for issuer, items in zip(self.__issuers, restrictions)}

    async def get_proof_schema(self, opts: Optional[dict] = None) -> dict:
        """
        :param opts: (optional) {'schema': <name>} or {'uselei': True} selects proof schema file
        """
        template = self.__select_template(opts or {})

        logger.info(f'Making sure we still have a connection to {", ".join(i.issuer for i in self.__issuers)}')
        await self.setup()
        restrictions = await self.get_restrictions()

        proof_request = {
            'name': template['name'],
            'version': unique_version(template['version']),
            'requested_attributes': {}
        }
        for key, attr in (template.get('requested_attributes') or {}).items():
            name = attr['name']
            role = issuer_role_for_key(key, self.__markers)
            proof_request['requested_attributes'][name] = {
                'name': name,
                'restrictions': list(restrictions.get(role, [])) if role else []
            }
        return proof_request

    async def check_proof(self, verification: dict, context=None) -> dict:
        """Make sure mandatory fields were proven by credentials

        :return: accepted verification
        """
        check_verification_id(verification)
        proof_attributes = get_attributes(verification)

        logger.debug(f'Displaying proof values for verification {verification["id"]}:')
        attributes = {}
        for attr in proof_attributes:
            if attr.get('cred_def_id'):
                attributes[attr.get('name')] = attr.get('value')
            logger.debug(f'  {"*" if attr.get("cred_def_id") else " "}{attr.get("name")} = {attr.get("value")}')
        logger.debug('(*Verified values from credential)')

        for requirement in self.__required_fields:
            field = missing_field(requirement, attributes)
            if field is not None:
                raise MissingAttributeError(field, f'A verified attestation of {requirement} was not provided')
        return verification

    async def proof_to_user_record(self, verification: dict) -> Optional[dict]:
        attributes = self._flatten(verification)
        if self.__record_fields is None:
            user_record = dict(attributes)
        else:
            user_record = {field: attributes.get(field) for field in self.__record_fields}
        if self.__member_identifier:
            user_record['member_identifier'] = str(uuid.uuid4())
        return user_record

    @staticmethod
    def _flatten(verification: dict) -> dict:
        check_verification_id(verification)
        return {attr.get('name'): attr.get('value') for attr in get_attributes(verification)}

    def __select_template(self, opts: dict) -> dict:
        if opts.get('uselei') is True:
            name = LEI_SCHEMA
        else:
            name = opts.get('schema') or DEFAULT_SCHEMA
        cell = self.__cells.get(name)
        if cell is None:
            raise ConfigurationError(f'Unknown proof schema "{name}"')
        return cell.get()

    async def __issuer_restrictions(self, issuer: TrustedIssuer) -> List[dict]:
        logger.info(f'Looking up credential definitions for issuer {issuer.issuer}')
        cred_defs = await self.__agent.get_credential_definitions(None, {issuer.tag: 'true'})
        logger.debug(f"{issuer.issuer}'s credential definitions: {cred_defs}")
        restrictions = []
        for agent in (cred_defs or {}).get('agents', []):
            for item in agent.get('results', {}).get('items', []):
                restrictions.append({'cred_def_id': item['id']})
        return restrictions


class LeiSignupHelper(AccountSignupHelper):
    """Signup by LEI credential, user record is filled from LEI registry
    """

    def __init__(self, *args, registry: LeiRegistry = None, **kwargs):
        kwargs.setdefault('markers', LEI_ISSUER_MARKERS)
        kwargs.setdefault('required_fields', LEI_REQUIRED_FIELDS)
        kwargs.setdefault('member_identifier', False)
        super().__init__(*args, **kwargs)
        self.__registry = registry or LeiRegistry()

    @property
    def registry(self) -> LeiRegistry:
        return self.__registry

    @classmethod
    def for_lei_issuer(
            cls, gleif_issuer: str, lei_issuer: str, proof_schema_path: str, agent, **kwargs
    ) -> "LeiSignupHelper":
        return cls(
            issuers=[TrustedIssuer(LEI, lei_issuer), TrustedIssuer(GLEIF, gleif_issuer)],
            schemas=proof_schema_path,
            agent=agent,
            **kwargs
        )

    async def proof_to_user_record(self, verification: dict) -> Optional[dict]:
        attributes = self._flatten(verification)
        if not attributes.get('lei'):
            raise InvalidVerificationError('Invalid verification: LEI was not provided')
        return await self.__registry.build_user_record(attributes['lei'])

import logging
from typing import Optional, List

from ssi_helpers.abstract.helpers import ProofHelper
from ssi_helpers.errors.exceptions import *
from ssi_helpers.proofs.templates import TemplateCell, check_template_path, unique_version


logger = logging.getLogger(__name__)


def normalize_attr_name(name: str) -> str:
    """Credential exchange strips spaces and capital letters from proof attribute names"""
    return name.lower().replace(' ', '')


def find_proof_attributes(attributes: list, name: str) -> List[dict]:
    """Proof attributes whose name matches normalized name, in proof order"""
    expected = normalize_attr_name(name)
    return [attr for attr in attributes if attr.get('name') and attr['name'] == expected]


def get_attributes(verification: dict) -> list:
    info = verification.get('info') if isinstance(verification, dict) else None
    attributes = info.get('attributes') if isinstance(info, dict) else None
    if not isinstance(attributes, list):
        raise InvalidVerificationError('No attributes found in given Verification')
    return attributes


class LoginHelper(ProofHelper):
    """Static proof requests for verifiable credential based logins
    """

    def __init__(self, proof_schema_file: str):
        """
        :param proof_schema_file: path to proof schema JSON file
        """
        self.__cell = TemplateCell(check_template_path(proof_schema_file))

    @property
    def proof_schema_file(self) -> str:
        return self.__cell.path

    async def get_proof_schema(self, opts: Optional[dict] = None) -> dict:
        """
        :param opts: (optional) {'restrictions': [{'cred_def_id': ...}]} applied to every requested attribute
        """
        ret = self.__cell.copy()
        ret['version'] = unique_version(ret['version'])
        restrictions = (opts or {}).get('restrictions')
        if ret.get('requested_attributes') and restrictions:
            for attr in ret['requested_attributes'].values():
                attr['restrictions'] = restrictions
        return ret

    async def check_proof(self, verification: dict, context: dict = None) -> bool:
        """Check every template attribute is proven and matches user record

        :param verification: accepted verification
        :param context: user record with "personal_info" mapping
        """
        attributes = get_attributes(verification)
        if not isinstance(context, dict) or not isinstance(context.get('personal_info'), dict):
            raise InvalidUserRecordError('Invalid user record')
        personal_info = context['personal_info']
        template = self.__cell.get()

        logger.info('Checking the proof for the proper attributes')
        for schema_attr in (template.get('requested_attributes') or {}).values():
            name = schema_attr['name']
            logger.debug(f'Checking proof for schema attribute: {name}')
            matches = find_proof_attributes(attributes, name)
            if not matches:
                raise AttributeMismatchError(name, f'Requested attribute "{name}" was not present in the proof')
            if schema_attr.get('restrictions'):
                for proof_attr in matches:
                    if not proof_attr.get('cred_def_id'):
                        raise UnverifiedAttributeError(
                            name, f'Requested attribute "{name}" did not have an associated credential'
                        )
            proof_attr = matches[-1]
            if name not in personal_info or personal_info[name] != proof_attr.get('value'):
                raise ValueMismatchError(name, f'Verified attribute "{name}" did not match the user record')
            logger.debug(f'Proof attribute {proof_attr["name"]} matches the user record')
        logger.info('Verified all proof attributes from the proof')
        return True


class NullProofHelper(ProofHelper):
    """Purely self attested proof schema, check result is fixed in advance
    """

    def __init__(self, pass_proofs: bool = False):
        self.__pass_proofs = bool(pass_proofs)

    @property
    def pass_proofs(self) -> bool:
        return self.__pass_proofs

    async def get_proof_schema(self, opts: Optional[dict] = None) -> dict:
        return {
            'name': 'Dummy Proof Request',
            'version': unique_version('1.0'),
            'requested_attributes': {
                'dummy_attribute': {
                    'name': 'dummy_attribute'
                }
            }
        }

    async def check_proof(self, verification: dict = None, context=None) -> bool:
        if self.__pass_proofs:
            return True
        raise ProofRejectedError('Proof was not accepted')

import pytest

from .helpers import FakeAgent, write_json


LOGIN_SCHEMA = {
    'name': 'Login Proof Request',
    'version': '1.0',
    'requested_attributes': {
        'first_name': {'name': 'first name'},
        'last_name': {'name': 'last_name'},
    }
}

IFT_SCHEMA = {
    'name': 'IFT Network Signup',
    'version': '2.1',
    'requested_attributes': {
        'company_name_ift': {'name': 'company_name'},
        'supplier_id_ift': {'name': 'supplier_identifier'},
        'tys_identifier': {'name': 'tys_identifier'},
        'tys_and_ift_overlap': {'name': 'overlap'},
        'tax_id': {'name': 'tax_id'},
    }
}

IFT_LEI_SCHEMA = {
    'name': 'IFT Network Signup LEI',
    'version': '3.0',
    'requested_attributes': {
        'company_name_ift': {'name': 'company_name'},
        'lei_number': {'name': 'lei'},
    }
}

LEI_SCHEMA = {
    'name': 'LEI Issuer Signup',
    'version': '1.0',
    'requested_attributes': {
        'number_lei': {'name': 'lei'},
        'legal_name_gleif': {'name': 'legal_name'},
        'email': {'name': 'email'},
    }
}

CRED_DEFS = {
    'trustedTYSIssuer': ['tys:cred_def:1'],
    'trustedIFTFounderIssuer': ['ift:cred_def:1', 'ift:cred_def:2'],
    'trustedLEIIssuer': ['lei:cred_def:1'],
    'trustedGLEIF': ['gleif:cred_def:1'],
}


@pytest.fixture()
def login_schema_file(tmp_path) -> str:
    return write_json(tmp_path / 'login_proof.json', LOGIN_SCHEMA)


@pytest.fixture()
def ift_schema_file(tmp_path) -> str:
    return write_json(tmp_path / 'signup_tys.json', IFT_SCHEMA)


@pytest.fixture()
def ift_lei_schema_file(tmp_path) -> str:
    return write_json(tmp_path / 'signup_lei.json', IFT_LEI_SCHEMA)


@pytest.fixture()
def lei_schema_file(tmp_path) -> str:
    return write_json(tmp_path / 'lei_signup.json', LEI_SCHEMA)


@pytest.fixture()
def agent() -> FakeAgent:
    return FakeAgent(name='acme', cred_defs=CRED_DEFS)

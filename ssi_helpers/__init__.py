from ssi_helpers.abstract import AbstractAgent, ProofHelper, SignupHelper
from ssi_helpers.agent import CloudAgent
from ssi_helpers.proofs import LoginHelper, NullProofHelper, AccountSignupHelper, LeiSignupHelper, \
    TrustedIssuer, AnyOf
from ssi_helpers.registry import LeiRegistry, build_user_record_from_lei
from ssi_helpers.responder import ConnectionResponder
from ssi_helpers.config import Config, make_agent, make_login_helper, make_responder, make_registry
from ssi_helpers.errors import exceptions
from ssi_helpers import recipes


__all__ = [
    "AbstractAgent", "ProofHelper", "SignupHelper", "CloudAgent", "LoginHelper", "NullProofHelper",
    "AccountSignupHelper", "LeiSignupHelper", "TrustedIssuer", "AnyOf", "LeiRegistry",
    "build_user_record_from_lei", "ConnectionResponder", "Config", "make_agent", "make_login_helper",
    "make_responder", "make_registry", "exceptions", "recipes"
]

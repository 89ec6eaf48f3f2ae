from .agent import AbstractAgent
from .helpers import ProofHelper, SignupHelper


__all__ = ["AbstractAgent", "ProofHelper", "SignupHelper"]

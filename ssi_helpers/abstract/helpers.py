from abc import ABC, abstractmethod
from typing import Any, Optional


class ProofHelper(ABC):
    """Delegates responsibility for building proof requests and checking proof responses
    """

    @abstractmethod
    async def get_proof_schema(self, opts: Optional[dict] = None) -> dict:
        """Proof schema that can be used to create a proof request on the agent

        :param opts: parameters relevant to the construction of the proof request
        """
        raise NotImplemented

    @abstractmethod
    async def check_proof(self, verification: dict, context: Any = None) -> Any:
        """Check proof response against whatever is in context

        :return: accepted result, raise ProofRejectedError otherwise
        """
        raise NotImplemented


class SignupHelper(ProofHelper):
    """Manages proof schemas, proof verification and user record creation
    """

    @abstractmethod
    async def proof_to_user_record(self, verification: dict) -> Optional[dict]:
        """Personal data for a user record extracted from accepted verification
        """
        raise NotImplemented

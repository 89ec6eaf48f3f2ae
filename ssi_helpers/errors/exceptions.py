from typing import Any, Optional


class BaseHelperException(Exception):

    def __init__(self, message: str = None, *args, **kwargs):
        super(BaseHelperException, self).__init__(message, *args, **kwargs)
        self.message = message

    @staticmethod
    def _prefix_msg(msg, prefix=None):
        return "{}{}".format(
            "" if prefix is None else "{}: ".format(prefix),
            msg
        )

    def __str__(self):
        return self.message or self.__doc__ or super().__str__()


class ConfigurationError(BaseHelperException):
    """ Helper was constructed or configured with unusable parameters. """


class SchemaLoadError(ConfigurationError):
    """ Proof schema template is missing, unreadable or malformed. """


class InvalidIntervalError(ConfigurationError, ValueError):
    """ Polling interval must be a non-negative number. """


class ProofRejectedError(BaseHelperException):
    """ Proof was not accepted. """


class InvalidVerificationError(ProofRejectedError, TypeError):
    """ No attributes found in given Verification. """


class InvalidUserRecordError(ProofRejectedError, TypeError):
    """ Invalid user record. """


class AttributeValidationError(ProofRejectedError):

    def __init__(self, attribute: str, message: str = None, *args):
        super().__init__(message, *args)
        self.attribute = attribute


class AttributeMismatchError(AttributeValidationError):
    """ Requested attribute is absent from the proof. """


class UnverifiedAttributeError(AttributeValidationError):
    """ Restricted attribute was self attested. """


class ValueMismatchError(AttributeValidationError):
    """ Verified attribute did not match the user record. """


class MissingAttributeError(AttributeValidationError):
    """ Mandatory verified attribute was not provided. """


class SetupError(BaseHelperException):
    """ Connection to a trusted issuer could not be confirmed. """


class RegistryLookupError(BaseHelperException, LookupError):
    pass


class LeiLookupError(RegistryLookupError):
    """ LEI search returned no information. """


class LookupTransportError(RegistryLookupError):
    """ LEI registry could not be reached. """


class AgentError(BaseHelperException):
    """Identity agent answered with unexpected status

    :param status: HTTP status code
    :param body: decoded response body
    """

    def __init__(self, message: str = None, status: Optional[int] = None, body: Any = None, *args):
        super().__init__(message, *args)
        self.status = status
        self.body = body


class PollingError(BaseHelperException):

    def __init__(self, message: str = None, offer_id: str = None, *args):
        super().__init__(
            self._prefix_msg(message, 'offer {}'.format(offer_id) if offer_id else None), *args
        )
        self.offer_id = offer_id

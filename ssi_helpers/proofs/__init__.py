from .templates import TemplateCell, unique_version, load_template
from .login import LoginHelper, NullProofHelper, normalize_attr_name
from .signup import AccountSignupHelper, LeiSignupHelper, TrustedIssuer, AnyOf, issuer_role_for_key, \
    LEI_ISSUER_MARKERS, IFT_NETWORK_MARKERS, LEI_REQUIRED_FIELDS, IFT_NETWORK_REQUIRED_FIELDS, \
    IFT_NETWORK_RECORD_FIELDS, TRUST_TAGS


__all__ = [
    "TemplateCell", "unique_version", "load_template", "LoginHelper", "NullProofHelper", "normalize_attr_name",
    "AccountSignupHelper", "LeiSignupHelper", "TrustedIssuer", "AnyOf", "issuer_role_for_key",
    "LEI_ISSUER_MARKERS", "IFT_NETWORK_MARKERS", "LEI_REQUIRED_FIELDS", "IFT_NETWORK_REQUIRED_FIELDS",
    "IFT_NETWORK_RECORD_FIELDS", "TRUST_TAGS"
]

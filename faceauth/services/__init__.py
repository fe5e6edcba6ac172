"""Identity store and matching services."""
from .authentication import AuthenticationWorkflow
from .codec import DescriptorCodec
from .enrollment import EnrollmentWorkflow
from .matcher import Matcher
from .repository import IdentityRepository

__all__ = [
    "AuthenticationWorkflow",
    "DescriptorCodec",
    "EnrollmentWorkflow",
    "IdentityRepository",
    "Matcher",
]

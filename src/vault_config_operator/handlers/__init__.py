"""Handler modules for CRD resources."""

# Import handlers to register them - all handlers register themselves via @kopf decorators
from . import database  # noqa: F401
from . import ldap  # noqa: F401
from . import mount  # noqa: F401
from . import pki  # noqa: F401
from . import policy  # noqa: F401
from . import random_secret  # noqa: F401

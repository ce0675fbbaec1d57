from . import _version

__version__ = _version.__version__


from .client import Nomad
from .config import Config
from .exceptions import (
    NomadDeserializationError,
    NomadError,
    NomadEvaluationError,
    NomadInvalidInputError,
    NomadJobSchedulingError,
    NomadJobTimeoutError,
    NomadNetworkError,
    NomadNotFoundError,
    NomadRequestError,
    NomadServerError,
)
from .options import QueryOptions, WriteOptions

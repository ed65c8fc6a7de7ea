from .build import build
from .check_codes import check_codes
from .config import config
from .directives import directives
from .error_kind import error_kind
from .features import features
from .log import log
from .plan import plan
from .probe import probe
from .version import version

__all__ = [
    "build",
    "check_codes",
    "config",
    "directives",
    "error_kind",
    "features",
    "log",
    "plan",
    "probe",
    "version",
]

from .config import BuildConfig, load_build_config
from .emitter import emit
from .plan import BuildDriver, BuildPlan, LinkDecision, LinkKind
from .resolver import resolve
from .status_codes import ErrorKind, Unknown, to_error_kind

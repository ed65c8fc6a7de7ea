"""
Native status codes of librdkafka (``rd_kafka_resp_err_t``) as a closed
enumeration with a catch-all for codes added by later releases.

The table is built once at import time and never changes. ``to_error_kind``
is total: codes missing from the table come back as ``Unknown(code)``.

When librdkafka is upgraded, run ``rdkbuilder check-codes --header
<librdkafka>/src/rdkafka.h``. It fails if the header has codes without a
member here; add them, refresh ``data/rdkafka_resp_err.h`` and bump
``CATALOG_VERSION``.
"""
import enum
import re
from dataclasses import dataclass
from importlib import resources
from types import MappingProxyType

from .errors import UncoveredStatusCodes

CATALOG_VERSION = "2.3.0"

_LOCAL_PREFIX = "RD_KAFKA_RESP_ERR__"
_BROKER_PREFIX = "RD_KAFKA_RESP_ERR_"
_ENUMERATOR = re.compile(r"^\s*(RD_KAFKA_RESP_ERR_\w+)\s*=\s*(-?\d+)\s*,?", re.MULTILINE)


@enum.unique
class ErrorKind(enum.IntEnum):
    # Local (client-side) codes, -200 .. -100.
    BEGIN = -200
    BAD_MSG = -199
    BAD_COMPRESSION = -198
    DESTROY = -197
    FAIL = -196
    TRANSPORT = -195
    CRIT_SYS_RESOURCE = -194
    RESOLVE = -193
    MSG_TIMED_OUT = -192
    PARTITION_EOF = -191
    UNKNOWN_PARTITION = -190
    FS = -189
    UNKNOWN_TOPIC = -188
    ALL_BROKERS_DOWN = -187
    INVALID_ARG = -186
    TIMED_OUT = -185
    QUEUE_FULL = -184
    ISR_INSUFF = -183
    NODE_UPDATE = -182
    SSL = -181
    WAIT_COORD = -180
    UNKNOWN_GROUP = -179
    IN_PROGRESS = -178
    PREV_IN_PROGRESS = -177
    EXISTING_SUBSCRIPTION = -176
    ASSIGN_PARTITIONS = -175
    REVOKE_PARTITIONS = -174
    CONFLICT = -173
    STATE = -172
    UNKNOWN_PROTOCOL = -171
    NOT_IMPLEMENTED = -170
    AUTHENTICATION = -169
    NO_OFFSET = -168
    OUTDATED = -167
    TIMED_OUT_QUEUE = -166
    UNSUPPORTED_FEATURE = -165
    WAIT_CACHE = -164
    INTR = -163
    KEY_SERIALIZATION = -162
    VALUE_SERIALIZATION = -161
    KEY_DESERIALIZATION = -160
    VALUE_DESERIALIZATION = -159
    PARTIAL = -158
    READ_ONLY = -157
    NOENT = -156
    UNDERFLOW = -155
    INVALID_TYPE = -154
    RETRY = -153
    PURGE_QUEUE = -152
    PURGE_INFLIGHT = -151
    FATAL = -150
    INCONSISTENT = -149
    GAPLESS_GUARANTEE = -148
    MAX_POLL_EXCEEDED = -147
    UNKNOWN_BROKER = -146
    NOT_CONFIGURED = -145
    FENCED = -144
    APPLICATION = -143
    ASSIGNMENT_LOST = -142
    NOOP = -141
    AUTO_OFFSET_RESET = -140
    LOG_TRUNCATION = -139
    END = -100

    # Broker codes.
    UNKNOWN = -1
    NO_ERROR = 0
    OFFSET_OUT_OF_RANGE = 1
    INVALID_MSG = 2
    UNKNOWN_TOPIC_OR_PART = 3
    INVALID_MSG_SIZE = 4
    LEADER_NOT_AVAILABLE = 5
    NOT_LEADER_FOR_PARTITION = 6
    REQUEST_TIMED_OUT = 7
    BROKER_NOT_AVAILABLE = 8
    REPLICA_NOT_AVAILABLE = 9
    MSG_SIZE_TOO_LARGE = 10
    STALE_CTRL_EPOCH = 11
    OFFSET_METADATA_TOO_LARGE = 12
    NETWORK_EXCEPTION = 13
    COORDINATOR_LOAD_IN_PROGRESS = 14
    COORDINATOR_NOT_AVAILABLE = 15
    NOT_COORDINATOR = 16
    TOPIC_EXCEPTION = 17
    RECORD_LIST_TOO_LARGE = 18
    NOT_ENOUGH_REPLICAS = 19
    NOT_ENOUGH_REPLICAS_AFTER_APPEND = 20
    INVALID_REQUIRED_ACKS = 21
    ILLEGAL_GENERATION = 22
    INCONSISTENT_GROUP_PROTOCOL = 23
    INVALID_GROUP_ID = 24
    UNKNOWN_MEMBER_ID = 25
    INVALID_SESSION_TIMEOUT = 26
    REBALANCE_IN_PROGRESS = 27
    INVALID_COMMIT_OFFSET_SIZE = 28
    TOPIC_AUTHORIZATION_FAILED = 29
    GROUP_AUTHORIZATION_FAILED = 30
    CLUSTER_AUTHORIZATION_FAILED = 31
    INVALID_TIMESTAMP = 32
    UNSUPPORTED_SASL_MECHANISM = 33
    ILLEGAL_SASL_STATE = 34
    UNSUPPORTED_VERSION = 35
    TOPIC_ALREADY_EXISTS = 36
    INVALID_PARTITIONS = 37
    INVALID_REPLICATION_FACTOR = 38
    INVALID_REPLICA_ASSIGNMENT = 39
    INVALID_CONFIG = 40
    NOT_CONTROLLER = 41
    INVALID_REQUEST = 42
    UNSUPPORTED_FOR_MESSAGE_FORMAT = 43
    POLICY_VIOLATION = 44
    OUT_OF_ORDER_SEQUENCE_NUMBER = 45
    DUPLICATE_SEQUENCE_NUMBER = 46
    INVALID_PRODUCER_EPOCH = 47
    INVALID_TXN_STATE = 48
    INVALID_PRODUCER_ID_MAPPING = 49
    INVALID_TRANSACTION_TIMEOUT = 50
    CONCURRENT_TRANSACTIONS = 51
    TRANSACTION_COORDINATOR_FENCED = 52
    TRANSACTIONAL_ID_AUTHORIZATION_FAILED = 53
    SECURITY_DISABLED = 54
    OPERATION_NOT_ATTEMPTED = 55
    KAFKA_STORAGE_ERROR = 56
    LOG_DIR_NOT_FOUND = 57
    SASL_AUTHENTICATION_FAILED = 58
    UNKNOWN_PRODUCER_ID = 59
    REASSIGNMENT_IN_PROGRESS = 60
    DELEGATION_TOKEN_AUTH_DISABLED = 61
    DELEGATION_TOKEN_NOT_FOUND = 62
    DELEGATION_TOKEN_OWNER_MISMATCH = 63
    DELEGATION_TOKEN_REQUEST_NOT_ALLOWED = 64
    DELEGATION_TOKEN_AUTHORIZATION_FAILED = 65
    DELEGATION_TOKEN_EXPIRED = 66
    INVALID_PRINCIPAL_TYPE = 67
    NON_EMPTY_GROUP = 68
    GROUP_ID_NOT_FOUND = 69
    FETCH_SESSION_ID_NOT_FOUND = 70
    INVALID_FETCH_SESSION_EPOCH = 71
    LISTENER_NOT_FOUND = 72
    TOPIC_DELETION_DISABLED = 73
    FENCED_LEADER_EPOCH = 74
    UNKNOWN_LEADER_EPOCH = 75
    UNSUPPORTED_COMPRESSION_TYPE = 76
    STALE_BROKER_EPOCH = 77
    OFFSET_NOT_AVAILABLE = 78
    MEMBER_ID_REQUIRED = 79
    PREFERRED_LEADER_NOT_AVAILABLE = 80
    GROUP_MAX_SIZE_REACHED = 81
    FENCED_INSTANCE_ID = 82
    ELIGIBLE_LEADERS_NOT_AVAILABLE = 83
    ELECTION_NOT_NEEDED = 84
    NO_REASSIGNMENT_IN_PROGRESS = 85
    GROUP_SUBSCRIBED_TO_TOPIC = 86
    INVALID_RECORD = 87
    UNSTABLE_OFFSET_COMMIT = 88
    THROTTLING_QUOTA_EXCEEDED = 89
    PRODUCER_FENCED = 90
    RESOURCE_NOT_FOUND = 91
    DUPLICATE_RESOURCE = 92
    UNACCEPTABLE_CREDENTIAL = 93
    INCONSISTENT_VOTER_SET = 94
    INVALID_UPDATE_VERSION = 95
    FEATURE_UPDATE_FAILED = 96
    PRINCIPAL_DESERIALIZATION_FAILURE = 97

    @property
    def is_local(self):
        return self.value <= ErrorKind.END.value

    @property
    def symbol(self):
        prefix = _LOCAL_PREFIX if self.is_local else _BROKER_PREFIX
        return prefix + self.name


@dataclass(frozen=True)
class Unknown:
    """A code the table did not know about when it was built."""
    code: int

    @property
    def name(self):
        return "UNKNOWN_CODE"

    @property
    def symbol(self):
        return None

    @property
    def is_local(self):
        return self.code <= ErrorKind.END.value


STATUS_CODE_TABLE = MappingProxyType({kind.value: kind for kind in ErrorKind})


def to_error_kind(code) -> "ErrorKind | Unknown":
    # Only ints and decimal integer strings can name a code; bools and
    # floats are never truncated into one.
    if isinstance(code, bool) or not isinstance(code, (int, str)):
        return Unknown(code)
    try:
        code = int(code)
    except ValueError:
        return Unknown(code)
    # NO_ERROR is 0, so test for None rather than truthiness.
    kind = STATUS_CODE_TABLE.get(code)
    return kind if kind is not None else Unknown(code)


def scan_header(text):
    """Returns {symbol: code} for every RD_KAFKA_RESP_ERR_* enumerator in text."""
    return {name: int(value) for name, value in _ENUMERATOR.findall(text)}


def load_bundled_catalog():
    """The error-code catalog of librdkafka CATALOG_VERSION shipped with the package."""
    text = resources.files("rdkbuilder").joinpath("data", "rdkafka_resp_err.h").read_text()
    return scan_header(text)


def missing_codes(catalog):
    """Catalog entries with no ErrorKind, or whose ErrorKind has another symbol."""
    missing = {}
    for symbol, code in catalog.items():
        kind = STATUS_CODE_TABLE.get(code)
        if kind is None or kind.symbol != symbol:
            missing[symbol] = code
    return missing


def check_coverage(catalog=None):
    """
    Fails with UncoveredStatusCodes if any catalog code is unmapped.

    Uses the bundled catalog when none is given. Returns the number of codes
    checked.
    """
    if catalog is None:
        catalog = load_bundled_catalog()
    missing = missing_codes(catalog)
    if missing:
        raise UncoveredStatusCodes(missing)
    return len(catalog)

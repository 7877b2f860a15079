"""XRP Ledger constants."""

from decimal import Decimal

DEFAULT_NODE_URL = "https://xrplcluster.com"

XRP_CURRENCY = "XRP"

# 1 XRP = 1,000,000 drops
DROPS_PER_XRP = Decimal(1_000_000)

# Minimum TVL (in XRP) of a reference pool used for price discovery
REFERENCE_THRESHOLD = Decimal(40_000)

# Label under which the total is reported
REPORT_TOKEN = "XRP"

# First ledger with AMM support enabled on mainnet
START_LEDGER = 86795283

METHODOLOGY = (
    "Finds all AMM pools on XRPL, checks their reserves, calculates TVL "
    "(in XRP) for each pool and sums them up."
)

LEDGER_OBJECT_TYPE_AMM = "amm"
VALIDATED_LEDGER = "validated"

# rippled error codes that indicate a transient condition
RETRYABLE_NODE_ERRORS = frozenset({"slowDown", "tooBusy", "noNetwork", "noCurrent"})

RETRYABLE_HTTP_STATUSES = frozenset({429, 500, 502, 503, 504})

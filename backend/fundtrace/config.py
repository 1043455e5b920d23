"""
config.py – Centralised configuration via environment variables.
All tunable thresholds live here so nothing is scattered across modules.
"""
import os


# ── File limits ────────────────────────────────────────────────────────────────
MAX_FILE_SIZE_MB: int = int(os.getenv("MAX_FILE_SIZE_MB", "20"))
MAX_FILE_SIZE_BYTES: int = MAX_FILE_SIZE_MB * 1024 * 1024
MAX_ROWS: int = int(os.getenv("MAX_ROWS", "10000"))
CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "*")

# ── Cycle detection ────────────────────────────────────────────────────────────
CYCLE_MIN_LEN: int = 3
CYCLE_MAX_LEN: int = int(os.getenv("CYCLE_MAX_LEN", "5"))
CYCLE_RING_BASE: float = 70.0
CYCLE_RING_PER_NODE: float = 5.0

# ── Smurfing detection ─────────────────────────────────────────────────────────
FAN_THRESHOLD: int = int(os.getenv("FAN_THRESHOLD", "3"))
SMURF_WINDOW_HOURS: int = int(os.getenv("SMURF_WINDOW_HOURS", "72"))
SMURF_MIN_RING_MEMBERS: int = 2
SMURF_RING_RISK: float = 80.0

# ── Shell detection ────────────────────────────────────────────────────────────
SHELL_MAX_TX: int = int(os.getenv("SHELL_MAX_TX", "3"))
SHELL_MIN_CHAIN: int = 4        # nodes, not hops
SHELL_MAX_CHAIN: int = int(os.getenv("SHELL_MAX_CHAIN", "6"))
SHELL_RING_BASE: float = 75.0
SHELL_RING_PER_NODE: float = 3.0

# ── High-velocity detection ────────────────────────────────────────────────────
VELOCITY_WINDOW_MINUTES: float = float(os.getenv("VELOCITY_WINDOW_MINUTES", "30.0"))
VELOCITY_MIN_TX: int = int(os.getenv("VELOCITY_MIN_TX", "4"))

# ── Amount structuring detection ───────────────────────────────────────────────
# Common reporting thresholds; a send within MARGIN below any of them counts.
STRUCTURING_THRESHOLDS: tuple = (10000.0, 5000.0, 3000.0)
STRUCTURING_MARGIN: float = float(os.getenv("STRUCTURING_MARGIN", "500.0"))
STRUCTURING_MIN_TX: int = int(os.getenv("STRUCTURING_MIN_TX", "3"))

# ── Bi-directional / round-trip detection ──────────────────────────────────────
ROUND_TRIP_AMOUNT_TOLERANCE: float = float(os.getenv("ROUND_TRIP_AMOUNT_TOLERANCE", "0.15"))
ROUND_TRIP_WINDOW_DAYS: float = float(os.getenv("ROUND_TRIP_WINDOW_DAYS", "7"))

# ── Dormant account activation ─────────────────────────────────────────────────
DORMANT_MIN_DATASET_DAYS: float = float(os.getenv("DORMANT_MIN_DATASET_DAYS", "7"))
DORMANT_MIN_TX: int = int(os.getenv("DORMANT_MIN_TX", "4"))
DORMANT_BURST_HOURS: float = float(os.getenv("DORMANT_BURST_HOURS", "48"))
DORMANT_BURST_SHARE: float = float(os.getenv("DORMANT_BURST_SHARE", "0.7"))
DORMANT_SPAN_MULTIPLIER: float = 3.0

# ── Scoring ────────────────────────────────────────────────────────────────────
# Base pattern contribution scores
SCORE_CYCLE_3: float = 30.0
SCORE_CYCLE_4: float = 25.0
SCORE_CYCLE_5: float = 20.0
SCORE_FAN_IN: float = 20.0
SCORE_FAN_OUT: float = 20.0
SCORE_SMURFING_SOURCE: float = 10.0
SCORE_SHELL: float = 25.0
SCORE_LOW_ACTIVITY: float = 15.0
SCORE_HIGH_VELOCITY: float = 18.0
SCORE_STRUCTURING: float = 22.0
SCORE_ROUND_TRIP: float = 20.0
SCORE_DORMANT: float = 15.0

SCORE_MULTI_PATTERN_BONUS: float = 10.0   # at 3+ labels, again at 5+ labels
SCORE_RING_BONUS: float = 5.0             # per ring membership
SCORE_RING_BONUS_CAP: float = 15.0
SCORE_PASS_THROUGH_BONUS: float = 8.0
PASS_THROUGH_RATIO_LOW: float = 0.6
PASS_THROUGH_RATIO_HIGH: float = 0.95

# Legitimate-business suppression
MERCHANT_MIN_TX: int = int(os.getenv("MERCHANT_MIN_TX", "20"))
MERCHANT_FLOW_RATIO: float = float(os.getenv("MERCHANT_FLOW_RATIO", "0.3"))
MERCHANT_PENALTY: float = 15.0
PAYROLL_MIN_TX: int = int(os.getenv("PAYROLL_MIN_TX", "10"))
PAYROLL_PENALTY: float = 20.0

# Minimum suspicion score for an account to appear in suspicious_accounts output.
MIN_SUSPICION_SCORE: float = float(os.getenv("MIN_SUSPICION_SCORE", "15.0"))

# Ring id assigned to accounts that carry patterns but never joined a ring.
STANDALONE_RING_ID: str = "STANDALONE"

"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# Roles whose holders follow the office calendar and office thresholds.
OFFICE_ROLES = frozenset({"admin", "hr", "finance"})

DEFAULT_FINAL_CONFIRMATION_ROLE = "hr"
# Roles that may approve or reject extra-work claims.
DEFAULT_CLAIM_APPROVER_ROLES = frozenset({"admin", "hr", "operation_manager", "site_manager"})
DEFAULT_FETCH_WORKERS = 4
DEFAULT_MAX_REPORT_DAYS = 366
DEFAULT_HISTORY_LIMIT = 200

MIN_LEAVE_REASON_LENGTH = 10
MIN_CLAIM_REASON_LENGTH = 10
MIN_OVERTIME_HOURS = 0.5
HALF_DAY_LEAVE_AMOUNT = 0.5
FLOATING_LEAVE_MONTHS = 12

# date.weekday() values for Saturday and Sunday
WEEKEND_DAYS = frozenset({5, 6})

UNKNOWN_USER_NAME = "Unknown"

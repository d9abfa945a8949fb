"""
Centralized configuration — env vars and scan constants.
"""
import os


# ── Logging ──────────────────────────────────────────────────────────────────
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
LOG_FORMAT = os.getenv('LOG_FORMAT', 'text')

# ── Redis ─────────────────────────────────────────────────────────────────────
REDIS_URL = os.getenv('REDIS_URL', 'redis://localhost:6379/0')

# ── Network database ──────────────────────────────────────────────────────────
DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite:///local.db')

# ── Auth ─────────────────────────────────────────────────────────────────────
DASHBOARD_PASSWORD = os.getenv('DASHBOARD_PASSWORD')
SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-change-me')

# ── Tenant URLs ───────────────────────────────────────────────────────────────
# Scheme used to rebuild the home URL of tenants we could not enter
SITE_SCHEME = os.getenv('SITE_SCHEME', 'https')

# ── Scan jobs ─────────────────────────────────────────────────────────────────
SCAN_JOB_TIMEOUT = int(os.getenv('SCAN_JOB_TIMEOUT', 14400))
SCAN_LOCK_TIMEOUT = int(os.getenv('SCAN_LOCK_TIMEOUT', 14400))
SCAN_FIRST_DELAY_SECONDS = int(os.getenv('SCAN_FIRST_DELAY_SECONDS', 300))
SCAN_INTERVAL_HOURS = int(os.getenv('SCAN_INTERVAL_HOURS', 24))

# ── Redis keys ────────────────────────────────────────────────────────────────
REPORT_CACHE_KEY = 'spam_audit:last_results'
SCAN_LOCK_KEY = 'spam_audit:scan_lock'
DAILY_JOB_KEY = 'spam_audit:daily_job_id'

# ── Comment statuses ──────────────────────────────────────────────────────────
STATUS_SPAM = 'spam'
STATUS_PENDING = 'pending'
STATUS_APPROVED = 'approved'
CANDIDATE_STATUSES = (STATUS_SPAM, STATUS_PENDING)

# ── Option names in each tenant's options table ──────────────────────────────
ROLES_OPTION = 'user_roles'
NAME_OPTION = 'blogname'
HOME_OPTION = 'home'

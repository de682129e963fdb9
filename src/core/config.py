"""
Configuration constants and environment setup.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# =============================================================================
# PATHS
# =============================================================================

PROJECT_ROOT = Path(__file__).parent.parent.parent
DATA_DIR = PROJECT_ROOT / "data"
DB_PATH = Path(os.environ.get("STAFFING_DB_PATH", DATA_DIR / "db" / "staffing.db"))
MOCK_DATA_PATH = DATA_DIR / "mock" / "db.json"
OUTPUT_DIR = PROJECT_ROOT / "output"

# =============================================================================
# DOMAIN VALUES
# =============================================================================

OPPORTUNITY_STATUSES = ("In Progress", "On Hold", "Done")
ROLE_STATUSES = ("Open", "Staffed", "Won", "Lost")
GRADES = ("JT", "T", "ST", "EN", "SE", "C", "SC", "SM")

# =============================================================================
# ALLOCATION RULES
# =============================================================================

FULL_ALLOCATION = 100  # percent of one full-time employee
DEFAULT_ROLE_ALLOCATION = 100
UNKNOWN_EMPLOYEE_NAME = "Unknown Employee"
AUTO_ACTIVATE_PROBABILITY = int(os.environ.get("AUTO_ACTIVATE_PROBABILITY", "80"))

# Opportunities without an expected end date count as overlapping every window
OPEN_ENDED_ALWAYS_OVERLAPS = (
    os.environ.get("OPEN_ENDED_ALWAYS_OVERLAPS", "true").lower() == "true"
)

# =============================================================================
# REPORT CONFIGURATION
# =============================================================================

SUMMARY_HEADERS = ["Employee ID", "Name", "Total Allocation (%)", "Status"]
DETAIL_HEADERS = [
    "Employee ID", "Name", "Opportunity ID", "Role",
    "Allocation (%)", "Start Date", "End Date",
]

# =============================================================================
# API CONFIGURATION
# =============================================================================

STAFFING_API_KEY = os.environ.get("STAFFING_API_KEY", "")
API_HOST = os.environ.get("API_HOST", "0.0.0.0")
API_PORT = int(os.environ.get("API_PORT", "8000"))
API_DEBUG = os.environ.get("API_DEBUG", "false").lower() == "true"
DEFAULT_PAGE_SIZE = int(os.environ.get("DEFAULT_PAGE_SIZE", "20"))
MAX_PAGE_SIZE = int(os.environ.get("MAX_PAGE_SIZE", "100"))
API_VERSION = "1.0.0"

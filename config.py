import os
from dotenv import load_dotenv

load_dotenv()
CHURCHTOOLS_BASE_URL = os.getenv('CHURCHTOOLS_BASE_URL', '').rstrip('/')
CHURCHTOOLS_TOKEN = os.getenv('CHURCHTOOLS_TOKEN')

# ============================================
# FILTER DEFAULTS
# ============================================
# Used when the user accepts the defaults at the prompt.

DEFAULT_CALENDARS = [2]              # "Gottesdienste"
DEFAULT_SERVICES = [6, 69, 72]       # tech services
DEFAULT_TIMEFRAME_MONTHS = 6
MIN_SERVICES_COUNT = 5
DEFAULT_AGGREGATION = 'SERVICE'

# ============================================
# OUTPUT
# ============================================

OUTPUTS_DIR = 'outputs'
DASHBOARD_BASENAME = 'serving_dashboard'

CHART_COLORS = [
    '#1e40af',
    '#dc2626',
    '#059669',
    '#d97706',
    '#7c3aed',
    '#db2777',
    '#0891b2',
    '#65a30d',
    '#475569',
    '#ea580c'
]

import logging
import os


# ---------------------------
# Constants / Config
# ---------------------------
DATA_DIR = "data"
DATA_FILE = os.getenv("CAMPAIGN_INSIGHTS_DATA_FILE", os.path.join(DATA_DIR, "marketing_data.json"))
FETCH_TIMEOUT = float(os.getenv("CAMPAIGN_INSIGHTS_FETCH_TIMEOUT", "10"))
LOG_LEVEL = os.getenv("CAMPAIGN_INSIGHTS_LOG_LEVEL", "INFO")

# Chart surface defaults (pixels)
CHART_WIDTH = 600
CHART_HEIGHT = 320
CHART_PADDING = 60

# Heat map defaults
MAP_HEIGHT = 500
DEFAULT_MAP_ZOOM = 7

# Dark theme shared by plotly figures and the page
TEXT_COLOR = "#E6EAF2"
HEADING_COLOR = "#FFFFFF"
MUTED_COLOR = "#A6B0C3"
PANEL_COLOR = "#1D2A48"
GRID_COLOR = "#2A3A5F"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(level=(level or LOG_LEVEL).upper(), format=LOG_FORMAT)

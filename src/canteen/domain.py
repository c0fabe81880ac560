"""Domain initialization and configuration."""

import os

from protean.domain import Domain

from canteen.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging(log_dir=os.getenv("LOG_DIR", "logs"), log_file_prefix="canteen")

# Get logger for this module
logger = get_logger(__name__)

# Students must register with an address on this domain
CAMPUS_EMAIL_DOMAIN = os.getenv("CAMPUS_EMAIL_DOMAIN", "thapar.edu")

# Domain Composition Root
canteen = Domain(name="canteen")

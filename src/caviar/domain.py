"""Domain initialization and configuration.

The caviar store is a single bounded context: catalogue, ordering, identity
and notifications share one Protean domain so that the order workflow can
talk to the catalogue synchronously.
"""

from protean.domain import Domain

from caviar.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

# Get logger for this module
logger = get_logger(__name__)

# Domain Composition Root
caviar = Domain(name="caviar")

"""
fleetcheck - Fleet property consistency checks

Inspects a configuration property exposed by every node of a cluster,
aggregates the observed values once per evaluation cycle, and reports a
consistency signal plus per-value counts as gauge metrics.
"""

__version__ = "0.1.0"

# Configuration is available at top level for convenience
from fleetcheck.config import config

__all__ = ["config", "__version__"]

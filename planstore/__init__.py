"""planstore: hybrid storage for Terraform plans.

Plans are written to a size-limited metadata store as chunk records, or
spilled to a local volume behind a small locator record when they are too
large.  Reads transparently handle every format ever written:

  - chunk records found by identity labels (current format)
  - locator records pointing at a gzip file on the spill volume
  - legacy single records with an inline, optionally gzipped payload
"""

__version__ = "0.2.0"
__description__ = "Hybrid size-limited / spill storage for Terraform plans"

from planstore.core.storage_manager import HybridStorageManager
from planstore.models.owner import PlanOwner
from planstore.models.storage import StorageConfig, StorageMethod, StorageType

__all__ = [
    "HybridStorageManager",
    "PlanOwner",
    "StorageConfig",
    "StorageMethod",
    "StorageType",
    "__version__",
]

"""
Configuration for fptree.

Values are read from environment variables with defaults. Library
functions take explicit arguments and only fall back to these.
"""

import os

# =============================================================================
# Search and construction
# =============================================================================

# Minimum similarity accepted as a match (strictly greater than)
MATCH_CUTOFF = float(os.getenv("FPTREE_MATCH_CUTOFF", "0.93"))

# Boundary recovery band is (1 - cutoff) * RECOVERY_FACTOR
RECOVERY_FACTOR = float(os.getenv("FPTREE_RECOVERY_FACTOR", "0.10"))

# Overlap band half-width used when building fuzzy trees
FUZZY_EPSILON = float(os.getenv("FPTREE_FUZZY_EPSILON", "0.07"))

# Fingerprints scoring above this against an earlier one are duplicates
DUPLICATE_THRESHOLD = float(os.getenv("FPTREE_DUPLICATE_THRESHOLD", "0.999999999"))

# =============================================================================
# Fingerprint extraction
# =============================================================================

WAVELET_SCALE_BASE = int(os.getenv("FPTREE_WAVELET_SCALE_BASE", "2"))
WAVELET_SCALE_EXPONENT = int(os.getenv("FPTREE_WAVELET_SCALE_EXPONENT", "1"))

# Parallel extraction workers
WORKERS = int(os.getenv("FPTREE_WORKERS", "8"))

IMAGE_EXTENSIONS = ('jpg', 'jpeg', 'gif', 'png', 'tiff')

# =============================================================================
# Storage and logging
# =============================================================================

DATABASE_URL = os.getenv("FPTREE_DATABASE_URL", "sqlite:///fingerprints.db")

LOG_LEVEL = os.getenv("FPTREE_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

"""Constants for mtime-rewind."""

# State file stored directly inside the root
STATE_FILE = ".hashprint"

# Optional per-root configuration (hidden, so never part of a snapshot)
CONFIG_FILE = ".mtime-rewind.yaml"

# Marker used by build-cache tooling: https://bford.info/cachedir/
CACHEDIR_TAG = "CACHEDIR.TAG"

# Names starting with this prefix are pruned during traversal
HIDDEN_PREFIX = "."

# State file binary format
STATE_MAGIC = b"MTRW"
STATE_VERSION = 1

# Bytes read per hashing chunk
DEFAULT_CHUNK_SIZE = 64 * 1024

# Version
VERSION = "0.1.0"

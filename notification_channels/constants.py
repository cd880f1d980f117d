"""Project-wide constants and mappings.

Importance and lock-screen visibility values use the platform's integer
encoding so payloads from the remote service can be stored verbatim.
"""

# Reserved channel ids
FALLBACK_CHANNEL_ID = "fcm_fallback_notification_channel"
FALLBACK_CHANNEL_NAME = "Miscellaneous"
# The platform's own built-in default channel; declarations naming it are
# written under the fallback id instead
SYSTEM_DEFAULT_CHANNEL_ID = "miscellaneous"

# Ids issued by the remote service carry this prefix
DEFAULT_MANAGED_CHANNEL_PREFIX = "OS_"

# Channel importance levels
IMPORTANCE_NONE = 0
IMPORTANCE_MIN = 1
IMPORTANCE_LOW = 2
IMPORTANCE_DEFAULT = 3
IMPORTANCE_HIGH = 4
IMPORTANCE_MAX = 5

VALID_IMPORTANCE_LEVELS = frozenset(range(IMPORTANCE_NONE, IMPORTANCE_MAX + 1))

# Lock-screen visibility
VISIBILITY_SECRET = -1
VISIBILITY_PRIVATE = 0
VISIBILITY_PUBLIC = 1

VALID_LOCKSCREEN_VISIBILITIES = frozenset(
    {VISIBILITY_SECRET, VISIBILITY_PRIVATE, VISIBILITY_PUBLIC}
)

DEFAULT_NOTIFICATION_SOUND_URI = "content://settings/system/notification_sound"

# snd_nm values that mean "no sound" (compared lowercase)
SILENT_SOUND_NAMES = frozenset({"none", "null", "nil"})

# Legacy notification priority (pri, 0-10) → channel importance.
# Evaluated top-down: first threshold the priority exceeds wins.
PRIORITY_TO_IMPORTANCE: tuple[tuple[int, int], ...] = (
    (9, IMPORTANCE_MAX),
    (7, IMPORTANCE_HIGH),
    (5, IMPORTANCE_DEFAULT),
    (3, IMPORTANCE_LOW),
    (1, IMPORTANCE_MIN),
)

# Payload wire keys
PAYLOAD_CHANNEL_KEY = "chnl"
PAYLOAD_OVERRIDE_CHANNEL_KEY = "oth_chnl"
PAYLOAD_CHANNEL_LIST_KEY = "chnl_lst"

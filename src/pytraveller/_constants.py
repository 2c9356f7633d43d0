"""Internal constants shared across the library."""

DEFAULT_ENDPOINT_TEMPLATE = "http://localhost:8080/sse?query={query}"
DEFAULT_QUERY = "7"

# Named SSE event carrying the tracked entity's position.
CURRENT_VALUE_EVENT = "current-value"
# Event type the event-stream format assigns to messages without an ``event:`` field.
DEFAULT_EVENT_TYPE = "message"

MAP_STYLE = "https://basemaps.cartocdn.com/gl/dark-matter-nolabels-gl-style/style.json"
MODEL_URL = "https://raw.githubusercontent.com/emanuelef/glb-models/main/airplane.glb"

# ------------------------------------------------------------------
# Camera
# ------------------------------------------------------------------

DEFAULT_LONGITUDE = -0.341004
DEFAULT_LATITUDE = 51.477487
DEFAULT_ZOOM = 10.852
DEFAULT_MIN_ZOOM = 1.0
DEFAULT_MAX_ZOOM = 18.0
DEFAULT_PITCH = 37.92255207
DEFAULT_BEARING = 2.394702

FOCUS_ZOOM = 12.0

# Manual jump preset (New York City), as (lat, lon).
JUMP_PRESET: tuple[float, float] = (40.7, -74.1)

# ------------------------------------------------------------------
# Scenegraph layer
# ------------------------------------------------------------------

LAYER_ID = "scenegraph-layer"
SIZE_SCALE = 125.0
SIZE_MIN_PIXELS = 0.1
SIZE_MAX_PIXELS = 1.5
ANIMATION_WILDCARD = "*"

# ------------------------------------------------------------------
# Transport
# ------------------------------------------------------------------

# EventSource default reconnection time; the server may override it via ``retry:``.
DEFAULT_RETRY_DELAY = 3.0
DEFAULT_CONNECT_TIMEOUT = 10.0

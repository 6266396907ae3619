"""Global constants for the application."""

# Animation settings
DEFAULT_FPS = 30  # Default frames per second for a mechanic
DEFAULT_DURATION_FRAMES = 300  # Default mechanic length (10 seconds at 30 fps)

# Field geometry (game units, field centre is the origin)
GAME_SIZE = 40  # Width of the playable field in game units
SCREEN_SIZE = 800  # Rendered field size in pixels
GRID_RINGS = (5, 10, 15, 20)  # Radii of the guide rings drawn on the field

# Opacity defaults
DEFAULT_AOE_OPACITY = 0.5
DEFAULT_OBJECT_OPACITY = 1.0
DEFAULT_TEXT_OPACITY = 1.0
DEFAULT_BACKGROUND_OPACITY = 0.5  # Used when blending a field without an explicit opacity

# Easing defaults
DEFAULT_MOVE_EASING = "linear"
DEFAULT_BOSS_MOVE_EASING = "easeInOut"

# Debuff badge settings
DEBUFF_BLINK_THRESHOLD = 1.0  # Seconds of remaining time below which badges blink
DEBUFF_BLINK_PERIOD = 6  # Frames per blink half-cycle

# Editor history
HISTORY_LIMIT = 50  # Maximum number of undo snapshots kept

# Export
DEFAULT_EXPORT_WORKERS = 1  # Inline resolution unless overridden
EXPORT_BATCH_SIZE = 60  # Frames resolved per worker task

# Colors
FIELD_BACKGROUND_COLOR = "#1a1a3e"
SCREEN_BACKGROUND_COLOR = "#0a0a1a"
DEFAULT_AOE_COLOR = "#ff8c00"
DEFAULT_ENEMY_COLOR = "#8b0000"
ROLE_COLORS = {
    "T": "#3753c7",  # Tanks
    "H": "#2c9c3c",  # Healers
    "D": "#c73737",  # DPS
    "P": "#888888",  # Generic party slots
}
MARKER_COLORS = {
    "A": "#ff0000",
    "B": "#ffff00",
    "C": "#0000ff",
    "D": "#ff00ff",
    "1": "#ff0000",
    "2": "#ffff00",
    "3": "#0000ff",
    "4": "#ff00ff",
}

import math


# Track Constants
# Stadium circuit; the first edge of the centerline lies on the main straight.
DEFAULT_CONTROL_POINTS = (
    (600.0, 120.0),
    (950.0, 120.0),
    (1100.0, 360.0),
    (950.0, 600.0),
    (600.0, 600.0),
    (250.0, 600.0),
    (100.0, 360.0),
    (250.0, 120.0),
)
TRACK_HALF_WIDTH = 45.0  # distance from centerline to each wall
TRACK_MIN_CONTROL_POINTS = 4  # Catmull-Rom needs a full quadruple
SPLINE_STEPS_PER_SEGMENT = 50  # centerline samples between two control points
CHECKPOINT_STRIDE = 30  # every Nth centerline point is a checkpoint
GEOMETRY_EPSILON = 1e-9  # edges shorter than this cannot define a normal

# Distance Sensor Constants
SENSOR_NUM_RAYS = 9  # odd, so one ray points straight ahead
SENSOR_MAX_DISTANCE = 180.0  # ray length in world units
SENSOR_HALF_ANGLE = math.pi / 1.5  # fan spans [-120, +120] degrees around the heading
SENSOR_NO_HIT = 1.0  # normalized reading when nothing is within range

# Car Constants
CAR_WIDTH = 20.0
CAR_LENGTH = 40.0
CAR_MAX_SPEED = 12.0  # speed at which steering reaches full authority
CAR_TURN_GAIN = 0.1  # radians per tick at full steer and max speed
CAR_THROTTLE_FORCE = 0.5  # velocity added per tick at full throttle
CAR_FRICTION = 0.95  # velocity multiplier applied every tick
CAR_LAUNCH_SPEED = 2.0  # forward nudge given at spawn
THROTTLE_MIN = 0.2  # the car always keeps a little drive
THROTTLE_MAX = 1.0
STEERING_MIN = -1.0
STEERING_MAX = 1.0

# Simulation Clock Constants
SIMULATION_TIME_STEP = 0.5  # age units added per tick
DEFAULT_TICKS_PER_FRAME = 1
MAX_TICKS_PER_FRAME = 100

# Fitness & Lifecycle Constants
CHECKPOINT_CAPTURE_RADIUS = 40.0
FITNESS_DISTANCE_NORMALIZATION = 200.0
COLLISION_SENSOR_THRESHOLD = 0.05  # any reading below this is a wall hit
STAGNATION_SLOW_TIMEOUT = 20.0  # age after which a slow car is removed
STAGNATION_MIN_SPEED = 1.5
STAGNATION_HARD_TIMEOUT = 100.0  # age after which any car is removed
LIFETIME_LIMIT = 3000.0  # total time since spawn

# Death reasons
DEATH_COLLISION = "collision"
DEATH_STAGNATION = "stagnation"
DEATH_TIMEOUT = "timeout"
DEATH_LIFETIME = "lifetime"

# Brain Constants
BRAIN_FEEDBACK_INPUTS = 2  # previous throttle and steer
BRAIN_INPUT_SIZE = SENSOR_NUM_RAYS + BRAIN_FEEDBACK_INPUTS
BRAIN_HIDDEN_SIZE = 12
BRAIN_OUTPUT_SIZE = 2  # steer, throttle
WEIGHT_INIT_SCALE = 2.0  # weights start uniform in [-2, 2]

# Genetic Algorithm Constants
DEFAULT_POPULATION_SIZE = 50
MIN_POPULATION_SIZE = 2
MAX_POPULATION_SIZE = 1000
DEFAULT_MUTATION_RATE = 0.1
DEFAULT_CROSSOVER_RATE = 1.0
MUTATION_SCALE = WEIGHT_INIT_SCALE  # offsets share the initialization distribution
ELITE_COUNT = 2
PARENT_POOL_FRACTION = 0.5  # parents come from the top half

# Rendering Constants
DEFAULT_RENDER_FPS = 60
DEFAULT_WINDOW_WIDTH = 1280
DEFAULT_WINDOW_HEIGHT = 760
DEFAULT_WINDOW_SIZE = (DEFAULT_WINDOW_WIDTH, DEFAULT_WINDOW_HEIGHT)
WINDOW_CAPTION = "evoracer"

# Camera Constants
CAMERA_MARGIN_FACTOR = 0.05  # 5% margin around track when auto-fitting
MIN_ZOOM_FACTOR = 0.01
MAX_ZOOM_FACTOR = 50.0
DEFAULT_TRACK_WIDTH_FALLBACK = 100.0
DEFAULT_TRACK_HEIGHT_FALLBACK = 100.0
LEADER_FOLLOW_ZOOM = 2.0  # screen pixels per world unit while following the leader
CAMERA_MODE_TRACK_VIEW = "track_view"
CAMERA_MODE_LEADER_FOLLOW = "leader_follow"
CAMERA_TOGGLE_KEY = 'c'

# Colors (RGB)
BACKGROUND_COLOR = (255, 255, 255)
TRACK_COLOR = (242, 242, 247)
WALL_COLOR = (209, 209, 214)
WALL_WIDTH = 3
CHECKPOINT_COLOR = (0, 200, 0)
CHECKPOINT_RADIUS = 5
HIGHLIGHT_COLOR = (0, 113, 227)
SENSOR_RAY_COLOR = (102, 170, 238)
DEAD_CAR_ALPHA = 70
HUD_TEXT_COLOR = (30, 30, 30)
HUD_BG_COLOR = (255, 255, 255)
HUD_BG_ALPHA = 200

# Generation tiers for car colouring, highest threshold first
GENERATION_TIERS = (
    (30, "green"),
    (15, "orange"),
    (5, "yellow"),
    (0, "red"),
)
TIER_COLORS = {
    "red": (220, 40, 40),
    "yellow": (235, 200, 30),
    "orange": (245, 140, 20),
    "green": (40, 170, 60),
}

# UI Constants
FONT_SIZE = 20
HUD_PADDING = 10
HUD_LINE_HEIGHT = 20
DEBUG_TOGGLE_KEY = 'd'
CHECKPOINT_TOGGLE_KEY = 'k'
DEBUG_PANEL_WEIGHTS_SHOWN = 10  # leading genome entries printed in the debug panel
DEBUG_PANEL_WIDTH = 430

# Logging Constants
DEFAULT_LOG_LEVEL = "INFO"  # Default logging level
DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"  # Default log format

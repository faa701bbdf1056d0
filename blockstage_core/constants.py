"""
Constants for BlockStage.
"""

# Stage and sprite dimensions (screen pixels)
SPRITE_SIZE: float = 60.0
DEFAULT_STAGE_WIDTH: float = 480.0
DEFAULT_STAGE_HEIGHT: float = 360.0

# Engine timing (seconds)
STEP_DELAY: float = 0.5
COLLISION_TICK_INTERVAL: float = 0.05
COLLISION_COOLDOWN: float = 0.5
AUTO_STOP_AFTER: float = 2.0

# Collision
COLLISION_DISTANCE: float = 60.0  # two 30px radii, center distance

# Block texts
PLACEHOLDER = "___"
TEXT_MOVE = "Move ___ steps"
TEXT_TURN = "Turn ___ degree"
TEXT_GOTO = "Go to x: ___ y: ___"
TEXT_SAY_FOR = "Say ___ for ___ sec"
TEXT_SAY_HELLO = "Say Hello"
TEXT_WHEN_CLICKED = "When ▶️ clicked"
TEXT_REPEAT = "Repeat ___ times"

# Input defaults
DEFAULT_MOVE_STEPS: float = 10.0
DEFAULT_TURN_DEGREES: float = 90.0
DEFAULT_GOTO_X: float = 0.0
DEFAULT_GOTO_Y: float = 0.0
DEFAULT_SAY_MESSAGE = "Hello!"
DEFAULT_SAY_SECONDS: float = 2.0
DEFAULT_REPEAT_TIMES: int = 10

# Category display colors
COLOR_MOTION = "bg-blue-400"
COLOR_LOOKS = "bg-purple-400"
COLOR_EVENT = "bg-yellow-400"
COLOR_CONTROL = "bg-green-400"

# Sprites
DEFAULT_SPRITE_NAME = "Cat"
DEFAULT_SPRITE_ASSET = "cat"

from enum import Enum

class AgentType(str, Enum):
    ADULT = "adult"
    CHILD = "child"
    ROBOT = "robot"
    ELDER = "elder"

class WaypointMode(str, Enum):
    LOOP = "loop"
    RANDOM = "random"

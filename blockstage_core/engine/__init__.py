from .config import EngineConfig
from .context import SimulationContext
from .interpreter import BlockInterpreter, InterpreterState
from .collision import CollisionEvent, CollisionMonitor
from .orchestrator import ExecutionOrchestrator

__all__ = [
    'EngineConfig', 'SimulationContext', 'BlockInterpreter', 'InterpreterState',
    'CollisionEvent', 'CollisionMonitor', 'ExecutionOrchestrator',
]

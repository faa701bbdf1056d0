"""
BlockStage core: block execution engine and sprite simulation for a
Scratch-style visual programming sandbox.
"""

from .session import StageSession

__all__ = ['StageSession']

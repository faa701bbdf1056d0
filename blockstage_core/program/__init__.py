from .store import ProgramStore

__all__ = ['ProgramStore']

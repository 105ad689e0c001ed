"""
Output generation modules.
"""

from .module_encoder import ModuleEncoder

__all__ = ['ModuleEncoder']

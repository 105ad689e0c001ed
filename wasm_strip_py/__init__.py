"""
wasm-strip
A tool for removing custom sections from WebAssembly modules.
"""

__version__ = "0.1.0"

from .config import Config
from .formats.wasm import WasmParser, NotSupportedError
from .io.binary_stream import BinaryReaderError
from .strip import RetentionPolicy, InvalidPatternError, strip_module, strip_module_with_report

__all__ = [
    'Config', 'WasmParser', 'NotSupportedError', 'BinaryReaderError',
    'RetentionPolicy', 'InvalidPatternError', 'strip_module',
    'strip_module_with_report', '__version__',
]

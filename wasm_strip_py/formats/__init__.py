"""
Executable format parsers.

Supports:
- WebAssembly core modules (components are detected and rejected)
"""

from .wasm import WasmParser, NotSupportedError
from .wasm_structures import *

__all__ = [
    'WasmParser', 'NotSupportedError', 'WasmSection', 'WasmSectionId',
    'WasmCodeEntry', 'WasmEnd', 'WasmVersion', 'WasmEncoding', 'NAME_SECTION',
]

"""
WebAssembly format structure definitions.
"""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional, Tuple


# WebAssembly magic and version
WASM_MAGIC = 0x6D736100  # "\0asm"
WASM_MODULE_VERSION = 1

# Layer half of the version field
WASM_MODULE_LAYER = 0
WASM_COMPONENT_LAYER = 1

# Name of the custom section holding function/local names
NAME_SECTION = "name"


class WasmSectionId(IntEnum):
    """WebAssembly section IDs."""
    CUSTOM = 0
    TYPE = 1
    IMPORT = 2
    FUNCTION = 3
    TABLE = 4
    MEMORY = 5
    GLOBAL = 6
    EXPORT = 7
    START = 8
    ELEMENT = 9
    CODE = 10
    DATA = 11
    DATA_COUNT = 12
    TAG = 13


class WasmEncoding(Enum):
    """Container variant declared by the preamble."""
    MODULE = "module"
    COMPONENT = "component"


@dataclass
class WasmVersion:
    """Preamble record."""
    encoding: WasmEncoding = WasmEncoding.MODULE
    version: int = WASM_MODULE_VERSION
    offset: int = 0
    size: int = 8


@dataclass
class WasmSection:
    """
    WebAssembly section.

    `offset`/`size` cover the section contents after the id byte and the
    LEB128 size. For custom sections this includes the encoded name;
    `data_offset`/`data_size` cover the payload following it.
    """
    id: int = 0
    size: int = 0
    offset: int = 0  # File offset where section content starts
    name: str = ""   # For custom sections
    data_offset: int = 0
    data_size: int = 0

    @property
    def kind(self) -> Optional[WasmSectionId]:
        """Known section kind, or None for ids this format does not define."""
        try:
            return WasmSectionId(self.id)
        except ValueError:
            return None

    @property
    def is_custom(self) -> bool:
        return self.id == WasmSectionId.CUSTOM

    @property
    def range(self) -> Tuple[int, int]:
        return self.offset, self.offset + self.size

    @property
    def data_range(self) -> Tuple[int, int]:
        return self.data_offset, self.data_offset + self.data_size


@dataclass
class WasmCodeEntry:
    """A single function body inside the code section."""
    index: int = 0
    offset: int = 0  # File offset of the body, after its size prefix
    size: int = 0


@dataclass
class WasmEnd:
    """End of the container."""
    offset: int = 0

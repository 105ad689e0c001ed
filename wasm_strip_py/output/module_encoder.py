"""
WebAssembly module encoder.

Rebuilds a module from raw section contents, re-deriving each section's
framing so the output stays valid when sections are dropped.
"""

from ..io.binary_stream import BinaryStream, Buffer
from ..formats.wasm_structures import WASM_MAGIC, WASM_MODULE_VERSION, WASM_MODULE_LAYER


class ModuleEncoder:
    """
    Accumulates sections into a new module.

    The preamble is written on construction; `section` appends one framed
    section; `finish` returns the assembled bytes.
    """

    def __init__(self):
        self._stream = BinaryStream()
        self._stream.write_uint32(WASM_MAGIC)
        self._stream.write_uint16(WASM_MODULE_VERSION)
        self._stream.write_uint16(WASM_MODULE_LAYER)

    def section(self, section_id: int, data: Buffer) -> None:
        """Append a section: id byte, LEB128 content size, then the contents."""
        if not 0 <= section_id <= 0xFF:
            raise ValueError(f"invalid section id: {section_id}")
        self._stream.write_byte(section_id)
        self._stream.write_var_u32(len(data))
        self._stream.write_bytes(data)

    def finish(self) -> bytes:
        """Get the assembled module."""
        return self._stream.get_data()

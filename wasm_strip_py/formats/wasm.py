"""
WebAssembly (WASM) section walker.

Splits a module into its sections without decoding their contents. Each
record carries offsets into the input buffer so that callers can copy a
section's bytes verbatim.
"""

import logging
from typing import Iterator, List, Union

from ..io.binary_stream import BinaryStream, BinaryReaderError
from .wasm_structures import (
    WasmSection, WasmCodeEntry, WasmEnd, WasmVersion, WasmEncoding,
    WASM_MAGIC, WASM_MODULE_VERSION, WASM_MODULE_LAYER, WASM_COMPONENT_LAYER,
    WasmSectionId
)

log = logging.getLogger(__name__)

Payload = Union[WasmVersion, WasmSection, WasmCodeEntry, WasmEnd]


class NotSupportedError(Exception):
    """Raised when the input is a container variant that cannot be processed."""
    pass


class WasmParser(BinaryStream):
    """
    Lazy section walker for WebAssembly modules.

    Components are rejected as soon as the preamble is read.
    """

    def parse_all(self) -> Iterator[Payload]:
        """Yield the preamble, each section (plus code entries), then the end marker."""
        self.position = 0
        yield self._read_header()

        while not self.eof():
            section = self._read_section()
            yield section
            if section.id == WasmSectionId.CODE:
                yield from self._read_code_entries(section)

        yield WasmEnd(offset=self.position)

    def sections(self) -> List[WasmSection]:
        """All section records in input order."""
        return [p for p in self.parse_all() if isinstance(p, WasmSection)]

    def section_bytes(self, section: WasmSection) -> memoryview:
        """Raw contents of a section, without its id and size prefix."""
        start, end = section.range
        return self.view(start, end)

    def custom_data(self, section: WasmSection) -> memoryview:
        """Payload of a custom section, following its name."""
        start, end = section.data_range
        return self.view(start, end)

    def _read_header(self) -> WasmVersion:
        magic = self.read_uint32()
        if magic != WASM_MAGIC:
            raise BinaryReaderError("magic header not detected: bad magic number", 0)

        version = self.read_uint16()
        layer = self.read_uint16()

        if layer == WASM_COMPONENT_LAYER:
            raise NotSupportedError("components are not supported yet with the `strip` command")
        if layer != WASM_MODULE_LAYER or version != WASM_MODULE_VERSION:
            raise BinaryReaderError(
                f"unknown binary version: 0x{(layer << 16) | version:x}", 4)

        log.debug("module preamble, version %d", version)
        return WasmVersion(encoding=WasmEncoding.MODULE, version=version, offset=0, size=8)

    def _read_section(self) -> WasmSection:
        """Read one section header and the fields the walker needs from its body."""
        section = WasmSection()
        section.id = self.read_byte()
        section.size = self.read_var_u32()
        section.offset = self.position

        if section.size > self.remaining:
            raise BinaryReaderError(
                f"section size mismatch: section declares {section.size} bytes "
                f"but only {self.remaining} remain",
                section.offset)

        kind = section.kind
        if kind == WasmSectionId.CUSTOM:
            self._read_custom_name(section)
        elif kind in (WasmSectionId.START, WasmSectionId.DATA_COUNT):
            self._read_single_index(section)

        if kind is None:
            log.debug("unknown section id %d (%d bytes)", section.id, section.size)
        else:
            log.debug("%s section (%d bytes)", kind.name.lower(), section.size)

        # Code entries are walked separately
        if kind != WasmSectionId.CODE:
            self.position = section.offset + section.size
        return section

    def _check_within(self, section: WasmSection, end: int) -> None:
        if end > section.offset + section.size:
            raise BinaryReaderError("unexpected end of section", section.offset + section.size)

    def _read_custom_name(self, section: WasmSection) -> None:
        name_len = self.read_var_u32()
        self._check_within(section, self.position + name_len)
        section.name = self.read_string(name_len)
        section.data_offset = self.position
        section.data_size = section.offset + section.size - self.position

    def _read_single_index(self, section: WasmSection) -> None:
        """Start and data count sections hold exactly one var_u32."""
        self.read_var_u32()
        self._check_within(section, self.position)
        if self.position != section.offset + section.size:
            raise BinaryReaderError(
                f"unexpected content in the {section.kind.name.lower()} section",
                self.position)

    def _read_code_entries(self, section: WasmSection) -> Iterator[WasmCodeEntry]:
        end = section.offset + section.size
        self.position = section.offset

        count = self.read_var_u32()
        self._check_within(section, self.position)

        for index in range(count):
            size = self.read_var_u32()
            body_offset = self.position
            self._check_within(section, body_offset + size)
            self.position = body_offset + size
            yield WasmCodeEntry(index=index, offset=body_offset, size=size)

        if self.position != end:
            raise BinaryReaderError("trailing bytes at end of section", self.position)

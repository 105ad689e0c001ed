"""
Tests for the WebAssembly section walker.
"""

import pytest

from wasm_strip_py.formats.wasm import WasmParser, NotSupportedError
from wasm_strip_py.formats.wasm_structures import (
    WasmCodeEntry, WasmEncoding, WasmEnd, WasmSection, WasmSectionId, WasmVersion,
)
from wasm_strip_py.io.binary_stream import BinaryReaderError

from wasm_builder import (
    CODE_SECTION, COMPONENT_HEADER, MODULE_HEADER, TYPE_SECTION,
    custom, leb, module, section,
)


def kinds(data):
    return [s.kind for s in WasmParser(data).sections()]


# ---------------------------------------------------------------------------
# Preamble
# ---------------------------------------------------------------------------

class TestPreamble:

    def test_empty_module(self):
        payloads = list(WasmParser(MODULE_HEADER).parse_all())
        assert len(payloads) == 2
        assert isinstance(payloads[0], WasmVersion)
        assert payloads[0].encoding is WasmEncoding.MODULE
        assert payloads[0].version == 1
        assert isinstance(payloads[1], WasmEnd)
        assert payloads[1].offset == 8

    def test_component_rejected(self):
        data = COMPONENT_HEADER + section(1, b"\x00")
        with pytest.raises(NotSupportedError, match="components are not supported"):
            list(WasmParser(data).parse_all())

    @pytest.mark.parametrize("version", [b"\x0a\x00", b"\x0d\x00", b"\xff\xff"])
    def test_component_rejected_for_any_version(self, version):
        data = b"\x00asm" + version + b"\x01\x00"
        with pytest.raises(NotSupportedError):
            list(WasmParser(data).parse_all())

    def test_component_rejected_before_any_section(self):
        seen = []
        with pytest.raises(NotSupportedError):
            for payload in WasmParser(COMPONENT_HEADER + custom("name", b"")).parse_all():
                seen.append(payload)
        assert seen == []

    def test_bad_magic(self):
        with pytest.raises(BinaryReaderError, match="magic header"):
            list(WasmParser(b"\x7fELF\x01\x00\x00\x00").parse_all())

    def test_truncated_header(self):
        with pytest.raises(BinaryReaderError, match="unexpected end-of-file"):
            list(WasmParser(b"\x00asm\x01\x00").parse_all())

    def test_empty_input(self):
        with pytest.raises(BinaryReaderError):
            list(WasmParser(b"").parse_all())

    def test_unknown_module_version(self):
        with pytest.raises(BinaryReaderError, match="unknown binary version: 0x2") as exc_info:
            list(WasmParser(b"\x00asm\x02\x00\x00\x00").parse_all())
        assert exc_info.value.offset == 4

    def test_unknown_layer(self):
        with pytest.raises(BinaryReaderError, match="unknown binary version"):
            list(WasmParser(b"\x00asm\x01\x00\x02\x00").parse_all())


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------

class TestSections:

    def test_order_and_kinds(self, sample_module):
        assert kinds(sample_module) == [
            WasmSectionId.TYPE,
            WasmSectionId.FUNCTION,
            WasmSectionId.CUSTOM,
            WasmSectionId.MEMORY,
            WasmSectionId.EXPORT,
            WasmSectionId.CODE,
            WasmSectionId.CUSTOM,
            WasmSectionId.CUSTOM,
            WasmSectionId.CUSTOM,
        ]

    def test_every_standard_kind(self):
        data = module(*(section(i, b"\x00") for i in range(1, 14) if i not in (8, 10, 12)),
                      section(8, b"\x00"), section(12, b"\x03"), section(10, b"\x00"))
        assert [k.name for k in kinds(data)] == [
            'TYPE', 'IMPORT', 'FUNCTION', 'TABLE', 'MEMORY', 'GLOBAL', 'EXPORT',
            'ELEMENT', 'DATA', 'TAG', 'START', 'DATA_COUNT', 'CODE',
        ]

    def test_section_range_is_content(self):
        data = module(section(1, TYPE_SECTION))
        parser = WasmParser(data)
        (sec,) = parser.sections()
        assert sec.offset == 10
        assert sec.size == len(TYPE_SECTION)
        assert bytes(parser.section_bytes(sec)) == TYPE_SECTION

    def test_custom_section_name_and_payload(self):
        data = module(custom("producers", b"payload"))
        parser = WasmParser(data)
        (sec,) = parser.sections()
        assert sec.is_custom
        assert sec.name == "producers"
        assert bytes(parser.custom_data(sec)) == b"payload"
        # the raw range covers the encoded name as well
        assert bytes(parser.section_bytes(sec)) == b"\x09producers" + b"payload"

    def test_custom_section_empty_payload(self):
        parser = WasmParser(module(custom("name", b"")))
        (sec,) = parser.sections()
        assert sec.name == "name"
        assert sec.data_size == 0

    def test_unknown_section_passed_through(self):
        data = module(section(0x42, b"future"))
        parser = WasmParser(data)
        (sec,) = parser.sections()
        assert sec.id == 0x42
        assert sec.kind is None
        assert not sec.is_custom
        assert bytes(parser.section_bytes(sec)) == b"future"

    def test_padded_size_prefix(self):
        data = MODULE_HEADER + b"\x01\x84\x80\x80\x80\x00" + TYPE_SECTION
        parser = WasmParser(data)
        (sec,) = parser.sections()
        assert sec.offset == 14
        assert bytes(parser.section_bytes(sec)) == TYPE_SECTION

    @pytest.mark.parametrize("wrap", [bytes, bytearray, memoryview])
    def test_sections_borrow_input(self, wrap):
        data = wrap(module(custom("producers", b"payload")))
        parser = WasmParser(data)
        (sec,) = parser.sections()
        view = parser.section_bytes(sec)
        assert view.obj is (data.obj if isinstance(data, memoryview) else data)
        assert bytes(parser.custom_data(sec)) == b"payload"

    def test_lazy(self):
        data = module(section(1, TYPE_SECTION)) + b"\x01\x7f"
        payloads = WasmParser(data).parse_all()
        assert isinstance(next(payloads), WasmVersion)
        assert isinstance(next(payloads), WasmSection)
        with pytest.raises(BinaryReaderError):
            next(payloads)


class TestCodeEntries:

    def test_entries_follow_code_section(self):
        code = b"\x02" + b"\x02\x00\x0b" + b"\x04\x00\x41\x00\x0b"
        payloads = list(WasmParser(module(section(10, code))).parse_all())
        assert isinstance(payloads[1], WasmSection)
        entries = [p for p in payloads if isinstance(p, WasmCodeEntry)]
        assert [(e.index, e.size) for e in entries] == [(0, 2), (1, 4)]
        assert entries[0].offset == 12
        assert isinstance(payloads[-1], WasmEnd)

    def test_sections_after_code(self):
        data = module(section(10, CODE_SECTION), custom("name", b""))
        assert kinds(data) == [WasmSectionId.CODE, WasmSectionId.CUSTOM]

    def test_body_past_section_end(self):
        data = module(section(10, b"\x01\x05\x00\x0b"), section(11, b"\x00\x00\x00"))
        with pytest.raises(BinaryReaderError, match="unexpected end of section"):
            list(WasmParser(data).parse_all())

    def test_trailing_bytes(self):
        data = module(section(10, CODE_SECTION + b"\x00"))
        with pytest.raises(BinaryReaderError, match="trailing bytes"):
            list(WasmParser(data).parse_all())


# ---------------------------------------------------------------------------
# Malformed input
# ---------------------------------------------------------------------------

class TestMalformed:

    def test_section_larger_than_input(self):
        data = MODULE_HEADER + b"\x01\x10" + TYPE_SECTION
        with pytest.raises(BinaryReaderError, match="section size mismatch") as exc_info:
            list(WasmParser(data).parse_all())
        assert exc_info.value.offset == 10

    def test_missing_size(self):
        with pytest.raises(BinaryReaderError, match="unexpected end-of-file"):
            list(WasmParser(MODULE_HEADER + b"\x01").parse_all())

    def test_custom_name_past_section_end(self):
        data = module(section(0, leb(10) + b"name")) + b"padding..."
        with pytest.raises(BinaryReaderError, match="unexpected end of section"):
            list(WasmParser(data).parse_all())

    def test_custom_name_invalid_utf8(self):
        data = module(section(0, b"\x02\xff\xfe"))
        with pytest.raises(BinaryReaderError, match="UTF-8"):
            list(WasmParser(data).parse_all())

    def test_start_section_extra_bytes(self):
        data = module(section(8, b"\x00\x00"))
        with pytest.raises(BinaryReaderError, match="start section"):
            list(WasmParser(data).parse_all())

    def test_data_count_section_empty(self):
        data = module(section(12, b""), section(1, TYPE_SECTION))
        with pytest.raises(BinaryReaderError):
            list(WasmParser(data).parse_all())

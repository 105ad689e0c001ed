"""
Custom section stripping.

Walks the input module once, asks the retention policy about every custom
section, and re-encodes the survivors together with all other sections in
their original order.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Union

from ..formats.wasm import WasmParser
from ..formats.wasm_structures import WasmSection
from ..output.module_encoder import ModuleEncoder
from .policy import RetentionPolicy

log = logging.getLogger(__name__)


@dataclass
class StripResult:
    """Stripped module plus a summary of what happened to custom sections."""
    data: bytes = b""
    kept: List[str] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)
    input_size: int = 0

    @property
    def output_size(self) -> int:
        return len(self.data)

    @property
    def saved(self) -> int:
        return self.input_size - self.output_size


def strip_module_with_report(
    data: Union[bytes, bytearray, memoryview],
    policy: Optional[RetentionPolicy] = None
) -> StripResult:
    """
    Strip custom sections from a module.

    Args:
        data: WebAssembly module bytes
        policy: Retention policy, defaults to keeping only the `name` section

    Returns:
        StripResult holding the new module

    Raises:
        NotSupportedError: If the input is a component
        BinaryReaderError: If the input is malformed
    """
    if policy is None:
        policy = RetentionPolicy()

    parser = WasmParser(data)
    module = ModuleEncoder()
    result = StripResult(input_size=len(data))

    for payload in parser.parse_all():
        if not isinstance(payload, WasmSection):
            continue

        if payload.is_custom:
            if not policy.retains(payload.name):
                log.debug("removing custom section %r (%d bytes)", payload.name, payload.size)
                result.removed.append(payload.name)
                continue
            log.debug("keeping custom section %r", payload.name)
            result.kept.append(payload.name)

        module.section(payload.id, parser.section_bytes(payload))

    result.data = module.finish()
    log.debug("stripped module: %d -> %d bytes", result.input_size, result.output_size)
    return result


def strip_module(
    data: Union[bytes, bytearray, memoryview],
    policy: Optional[RetentionPolicy] = None
) -> bytes:
    """Strip custom sections from a module and return the new module bytes."""
    return strip_module_with_report(data, policy).data

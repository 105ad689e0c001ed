"""
Shared fixtures for the wasm-strip tests.
"""

import pytest

from wasm_builder import custom, full_module, module, section


@pytest.fixture
def sample_module():
    """Module exercising standard, code and custom sections."""
    return full_module()


@pytest.fixture
def scenario_module():
    """name + producers custom sections followed by a function section."""
    return module(
        custom("name", b"X"),
        custom("producers", b"Y"),
        section(3, b"Z"),
    )


@pytest.fixture
def module_path(tmp_path, sample_module):
    path = tmp_path / "input.wasm"
    path.write_bytes(sample_module)
    return path

"""Test configuration and fixtures for CHIP-8 machine tests."""

import pytest
import jax.numpy as jnp
from chipvm import create_state, Machine, LEGACY_CONFIG
from chipvm.logging import TraceLogger


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state for each test."""
    return create_state()


@pytest.fixture
def legacy_state():
    """Provide a fresh state with the legacy COSMAC quirks enabled."""
    return create_state(config=LEGACY_CONFIG)


@pytest.fixture
def machine():
    """Provide a machine with no ROM loaded."""
    return Machine(logger=TraceLogger(log_level="CRITICAL"))


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def assemble(*opcodes):
    """Helper to turn 16-bit opcodes into big-endian ROM bytes."""
    return b"".join(opcode.to_bytes(2, "big") for opcode in opcodes)

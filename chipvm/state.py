"""CHIP-8 emulator state structures."""

import jax
import jax.numpy as jnp
from flax.struct import dataclass, PyTreeNode, field

from chipvm.constants import (
    PROGRAM_START, FONT_START, FONT_DATA, MEMORY_SIZE, NUM_KEYS, NUM_REGISTERS,
    SCREEN_WIDTH, SCREEN_HEIGHT, STACK_SIZE,
)
from chipvm.config import MachineConfig, DEFAULT_CONFIG
from chipvm.errors import MemoryAccessError


@dataclass(frozen=True)
class StackState:
    """Stack state for subroutine calls."""
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(STACK_SIZE, dtype=jnp.uint16))
    pointer: int = 0


class EmulatorState(PyTreeNode):
    """Main CHIP-8 emulator state.

    The display is indexed ``display[x, y]``. ``key_snapshot`` holds the
    keypad as it was when an ``LD Vx, K`` wait began; it is only meaningful
    while ``waiting_for_key`` is set. ``config`` is static and selects the
    compatibility behaviour of the instruction handlers.
    """
    rng: jax.random.PRNGKey
    memory: jnp.ndarray = field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))
    pc: jnp.ndarray = field(default_factory=lambda: jnp.astype(PROGRAM_START, jnp.uint16))
    display: jnp.ndarray = field(default_factory=lambda: jnp.zeros((SCREEN_WIDTH, SCREEN_HEIGHT), dtype=jnp.bool_))
    stack: StackState = StackState()
    delay_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    sound_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    keypad: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_KEYS, dtype=jnp.bool_))
    V: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8))
    I: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    key_snapshot: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_KEYS, dtype=jnp.bool_))
    waiting_for_key: bool = field(pytree_node=False, default=False)
    config: MachineConfig = field(pytree_node=False, default=DEFAULT_CONFIG)


def create_state(
    rng: jax.random.PRNGKey = jax.random.PRNGKey(0),
    config: MachineConfig = DEFAULT_CONFIG,
) -> EmulatorState:
    """Create initial emulator state with font data loaded."""
    state = EmulatorState(rng, config=config)
    return state.replace(memory=state.memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(
        jnp.array(FONT_DATA, dtype=jnp.uint8)
    ))


def set_register(state: EmulatorState, index: int, value: int) -> EmulatorState:
    """Write the low byte of value into V[index]."""
    return state.replace(V=state.V.at[index].set(int(value) & 0xFF))


def set_flag(state: EmulatorState, value: int) -> EmulatorState:
    """Write VF."""
    return set_register(state, 0xF, value)


def check_address(address: int, length: int = 1) -> None:
    """Raise MemoryAccessError unless [address, address + length) is in memory."""
    if address < 0 or address + length > MEMORY_SIZE:
        raise MemoryAccessError(address, length)


def read_memory(state: EmulatorState, address: int, length: int) -> jnp.ndarray:
    """Bounds-checked read of ``length`` bytes."""
    address = int(address)
    check_address(address, length)
    return state.memory[address:address + length]


def write_memory(state: EmulatorState, address: int, values) -> EmulatorState:
    """Bounds-checked write of a byte sequence."""
    address = int(address)
    values = jnp.asarray(values, dtype=jnp.uint8)
    check_address(address, values.shape[0])
    return state.replace(memory=state.memory.at[address:address + values.shape[0]].set(values))

"""CHIP-8 display operations."""

import jax.numpy as jnp
from chipvm.state import EmulatorState, read_memory, set_flag
from chipvm.decode import DecodedInstruction
from chipvm.constants import SCREEN_WIDTH, SCREEN_HEIGHT, SPRITE_WIDTH

# Bit positions of a sprite row, most significant bit first
bit_shifts = jnp.arange(SPRITE_WIDTH - 1, -1, -1, dtype=jnp.uint8)
column_offsets = jnp.arange(SPRITE_WIDTH)


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw sprite at (VX, VY) with height N, wrapping at the edges."""
    sprite_x = int(state.V[instruction.x]) % SCREEN_WIDTH
    sprite_y = int(state.V[instruction.y]) % SCREEN_HEIGHT

    sprite_bytes = read_memory(state, state.I, instruction.n)
    sprite = ((sprite_bytes[:, None] >> bit_shifts[None, :]) & 1).astype(jnp.bool_)

    xs = (sprite_x + column_offsets[None, :]) % SCREEN_WIDTH
    ys = (sprite_y + jnp.arange(instruction.n)[:, None]) % SCREEN_HEIGHT
    xs, ys = jnp.broadcast_arrays(xs, ys)

    # A sprite is never wider or taller than the screen, so no cell is hit twice
    mask = jnp.zeros_like(state.display).at[xs, ys].set(sprite)
    collision = jnp.any(state.display & mask)

    state = state.replace(display=state.display ^ mask)
    return set_flag(state, int(collision))

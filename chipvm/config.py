"""Machine configuration and compatibility switches."""

import enum

from flax.struct import dataclass, field


class UnknownOpcodePolicy(enum.Enum):
    """What ``step`` does with an opcode it cannot execute."""
    HALT = "halt"  # raise DecodeError and halt the machine
    SKIP = "skip"  # treat as a no-op and carry on


@dataclass(frozen=True)
class MachineConfig:
    """Execution configuration.

    The defaults give the classic instruction semantics. The legacy switches
    reproduce quirks some ROMs were written against.

    Attributes:
        unknown_opcode_policy: Handling of unknown and unsupported opcodes.
        shift_uses_vy: 8XY6/8XYE shift VY into VX (original COSMAC behaviour).
        load_store_increments_i: FX55/FX65 leave I pointing past the block.
        jump_uses_vx: BXNN jumps to NN + VX instead of NNN + V0.
        logic_resets_vf: 8XY1/8XY2/8XY3 clear VF (original COSMAC behaviour).
        seed: Seed of the PRNG driving CXKK.
    """
    unknown_opcode_policy: UnknownOpcodePolicy = field(pytree_node=False, default=UnknownOpcodePolicy.HALT)
    shift_uses_vy: bool = field(pytree_node=False, default=False)
    load_store_increments_i: bool = field(pytree_node=False, default=False)
    jump_uses_vx: bool = field(pytree_node=False, default=False)
    logic_resets_vf: bool = field(pytree_node=False, default=False)
    seed: int = field(pytree_node=False, default=0)


DEFAULT_CONFIG = MachineConfig()
LEGACY_CONFIG = MachineConfig(shift_uses_vy=True, load_store_increments_i=True, logic_resets_vf=True)

"""Run a tiny program that draws the hex digits 0-F, with instruction tracing."""

from chipvm import Machine
from chipvm.logging import TraceLogger

# V0 = digit, V1 = x, V2 = y
PROGRAM = [
    0x6000,  # 200: LD V0, 0
    0x6100,  # 202: LD V1, 0
    0x6200,  # 204: LD V2, 0
    0xF029,  # 206: LD F, V0
    0xD125,  # 208: DRW V1, V2, 5
    0x7105,  # 20A: ADD V1, 5
    0x7001,  # 20C: ADD V0, 1
    0x3010,  # 20E: SE V0, 16
    0x1206,  # 210: JP 206
    0xF30A,  # 212: LD V3, K
]


if __name__ == "__main__":
    rom = b"".join(opcode.to_bytes(2, "big") for opcode in PROGRAM)

    machine = Machine(logger=TraceLogger(log_level="DEBUG"))
    machine.load(rom)
    executed = machine.run(500)

    print(f"Executed {executed} cycles, status: {machine.status.value}")
    print(f"Lit pixels: {int(machine.display.sum())}")

# Instruction decoding for the IntCode machine.

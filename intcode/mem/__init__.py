# Growable linear memory for the IntCode machine.

from .interface import SlotDB, repl, run_file, parse_args_and_start, main

from focusflow.console import run

run()

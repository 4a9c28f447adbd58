"""
Run the server with the interactive operator console.
"""
import sys
import threading

import uvicorn

from pastebin.console import run_console
from pastebin.main import app


def main():
    config = uvicorn.Config(app, host="0.0.0.0", port=8000)
    server = uvicorn.Server(config)

    def stop():
        server.should_exit = True

    if sys.stdin.isatty():
        console = threading.Thread(
            target=run_console,
            args=(lambda: app.state.store.count(), stop),
            name="console",
            daemon=True,
        )
        console.start()

    server.run()


if __name__ == "__main__":
    main()

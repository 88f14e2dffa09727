import argparse
import os
import socket
import threading
import time
import webbrowser
from pathlib import Path

import uvicorn


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="CBDA exam simulator server")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--data-dir", default="data")
    parser.add_argument("--no-browser", action="store_true")
    return parser.parse_args()


def wait_for_server(host, port, timeout=10):
    start = time.time()
    while time.time() - start < timeout:
        try:
            with socket.create_connection((host, port), timeout=0.5):
                return True
        except OSError:
            time.sleep(0.2)
    return False


def open_browser(host, port):
    if wait_for_server(host, port):
        webbrowser.open(f"http://{host}:{port}/docs")


def main() -> None:
    args = parse_args()
    data_dir = Path(args.data_dir)
    data_dir.mkdir(parents=True, exist_ok=True)
    # api.config reads these at import, so they must be set before uvicorn loads the app
    os.environ.setdefault("DB_DIR", str(data_dir))
    os.environ.setdefault("EXPORTS_DIR", str(data_dir / "exports"))

    if not args.no_browser:
        threading.Thread(target=open_browser, args=(args.host, args.port), daemon=True).start()

    uvicorn.run(
        "api.app:app",
        host=args.host,
        port=args.port,
        log_level="info",
    )


if __name__ == "__main__":
    main()

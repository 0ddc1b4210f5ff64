# run_server.py
import faulthandler
import os
import sys
import traceback
from pathlib import Path

# write crash logs next to the exe
BASE_DIR = Path(sys.executable).resolve().parent if getattr(sys, "frozen", False) else Path(__file__).resolve().parent
LOG_FILE = BASE_DIR / "backend_crash.log"


def log(msg: str):
    with open(LOG_FILE, "a", encoding="utf-8") as f:
        f.write(msg + "\n")


def main():
    # dump fatal crashes too
    faulthandler.enable(open(LOG_FILE, "a", encoding="utf-8"))

    try:
        log("\n--- START ---")
        log(f"exe={sys.executable}")
        log(f"cwd={os.getcwd()}")
        log(f"base_dir={BASE_DIR}")

        import uvicorn

        from bank_loans.core.config import LOG_LEVEL, SERVER_HOST, SERVER_PORT

        # IMPORTANT: import app after crash logging is ready
        from main import app

        uvicorn.run(app, host=SERVER_HOST, port=SERVER_PORT, reload=False, log_level=LOG_LEVEL.lower())

    except Exception:
        err = traceback.format_exc()
        log(err)
        print(err)  # if console is visible
        if getattr(sys, "frozen", False):
            input("\nPress Enter to exit...")


if __name__ == "__main__":
    main()

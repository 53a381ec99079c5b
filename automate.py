import logging
import signal
import sys

from bidboard import config
from bidboard.board import BidBoard
from bidboard.scheduler import BoardScheduler
from bidboard.utils.persistence import JsonStore

logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)
LOGGER = logging.getLogger("bidboard")


def main():
    board = BidBoard(JsonStore(config.SETTINGS_FILE))

    # --- MODE 1: CLOUD / SINGLE RUN ---
    # Run with: python automate.py --once
    if "--once" in sys.argv:
        LOGGER.info("⚡ Single Run Mode Activated")
        board.refresh()
        LOGGER.info("Stats: %s", board.stats())
        if "--export" in sys.argv:
            board.export_saved()
        return 0

    # --- MODE 2: LOCAL LOOP ---
    # Run with: python automate.py
    scheduler = BoardScheduler(board)

    def shutdown(signum, frame):
        LOGGER.info("Stopping (signal %s)...", signum)
        scheduler.stop()

    signal.signal(signal.SIGINT, shutdown)
    signal.signal(signal.SIGTERM, shutdown)

    # start() runs one refresh right away
    thread = scheduler.start()
    while thread.is_alive():
        thread.join(1.0)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

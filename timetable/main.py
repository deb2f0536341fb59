import logging

import uvicorn
from timetable.api.api_run import app
from timetable.events.Event_Bus import GLOBAL_EVENT_BUS, SCHEDULE_STATE_CHANGED, log_listener
from timetable.utilities.config import APP_HOST, APP_PORT, DEBUG, LOG_LEVEL


if __name__ == "__main__":
    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    if DEBUG:
        # Trace every controller transition
        GLOBAL_EVENT_BUS.subscribe(SCHEDULE_STATE_CHANGED, log_listener)
    print(f"Uvicorn running on http://localhost:{APP_PORT} (Press CTRL+C to quit)")
    uvicorn.run(app, host=APP_HOST, port=APP_PORT)

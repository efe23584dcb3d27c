import logging
import logging.config
import os
import json_log_formatter

class CustomJSONFormatter(json_log_formatter.JSONFormatter):
    def json_record(self, message, extra, record):
        extra['message'] = message
        extra['timestamp'] = self.formatTime(record, self.datefmt)
        extra['level'] = record.levelname
        extra['logger'] = record.name
        if record.exc_info:
            extra['exc_info'] = self.formatException(record.exc_info)
        return extra

def setup_logging(log_dir='logs', app_env='development', level='INFO'):
    os.makedirs(log_dir, exist_ok=True)

    app_log_file = os.path.join(
        log_dir, 'application.log' if app_env == 'production' else 'dev-application.log'
    )
    error_log_file = os.path.join(log_dir, 'error.log')

    formatter = CustomJSONFormatter()

    # Main application log handler
    app_handler = logging.FileHandler(app_log_file)
    app_handler.setFormatter(formatter)

    # Errors also land in their own file
    error_handler = logging.FileHandler(error_log_file)
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(formatter)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(
        logging.Formatter('%(asctime)s [%(levelname)s] [%(name)s]: %(message)s', '%Y-%m-%d %H:%M:%S')
    )

    logging.basicConfig(
        level=level,
        handlers=[app_handler, error_handler, console_handler],
        force=True,
    )

    # Tracked errors go to error.log only, not the console or app log
    tracking_logger = logging.getLogger("error_tracking")
    tracking_logger.setLevel(logging.INFO)
    tracking_logger.handlers = [error_handler]
    tracking_logger.propagate = False

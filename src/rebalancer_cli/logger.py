import logging
import sys
import json
import os
import gzip
import shutil
from datetime import datetime
from logging.handlers import TimedRotatingFileHandler
from typing import Optional
from rebalance_config import LoggingConfig
from rebalancer_cli.context import get_current_run

# Attributes every LogRecord carries; anything else came in through `extra`
_RECORD_ATTRIBUTES = set(vars(logging.makeLogRecord({}))) | {'message', 'asctime'}

class CompressingTimedRotatingFileHandler(TimedRotatingFileHandler):
    """TimedRotatingFileHandler that gzips rotated files"""

    def doRollover(self):
        super().doRollover()

        # Rotated files are named <base>.<date>
        log_dir, base_name = os.path.split(self.baseFilename)

        try:
            rotated = [
                name for name in os.listdir(log_dir)
                if name.startswith(base_name + '.') and not name.endswith('.gz')
            ]
            for name in rotated:
                path = os.path.join(log_dir, name)
                with open(path, 'rb') as source, gzip.open(f'{path}.gz', 'wb') as target:
                    shutil.copyfileobj(source, target)
                os.remove(path)
        except OSError as e:
            # Rollover itself succeeded; report and keep the plain file
            print(f"Error during log compression: {e}", file=sys.stderr)

class StructuredFormatter(logging.Formatter):
    """Text or JSON-lines formatter that carries run_id and other extra fields"""

    def __init__(self, fmt_type: str = 'text'):
        super().__init__()
        self.fmt_type = fmt_type

    def format(self, record):
        log_data = {
            'timestamp': datetime.now().strftime('%Y-%m-%d %H:%M:%S'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage()
        }

        for key, value in record.__dict__.items():
            if key in _RECORD_ATTRIBUTES:
                continue
            if isinstance(value, datetime):
                log_data[key] = value.strftime('%Y-%m-%d %H:%M:%S')
            else:
                log_data[key] = value

        # Library modules log without extra; fill in the active run
        for key, value in _extract_run_properties().items():
            log_data.setdefault(key, value)

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        if self.fmt_type == 'json':
            return json.dumps(log_data, default=str)

        base_msg = f"{log_data['timestamp']} - {log_data['logger']} - {log_data['level']} - {log_data['message']}"
        if 'run_id' in log_data:
            base_msg += f" [run_id={log_data['run_id']}]"
        if log_data.get('strategy'):
            base_msg += f" [strategy={log_data['strategy']}]"
        if 'exception' in log_data:
            base_msg += f"\n{log_data['exception']}"
        return base_msg

def setup_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)

    # No handlers here; records propagate to the root logger
    return logger

def configure_root_logger(logging_config: Optional[LoggingConfig] = None):
    """Configure the root logger with structured formatting for every module"""
    logging_config = logging_config or LoggingConfig()
    root_logger = logging.getLogger()

    root_logger.handlers.clear()
    root_logger.setLevel(getattr(logging, logging_config.level))

    formatter = StructuredFormatter(logging_config.format)

    # stdout carries the rebalance report
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if logging_config.file_path:
        log_dir = os.path.dirname(os.path.abspath(logging_config.file_path))
        os.makedirs(log_dir, exist_ok=True)

        file_handler = CompressingTimedRotatingFileHandler(
            filename=logging_config.file_path,
            when='midnight',
            interval=1,
            backupCount=logging_config.backup_count,
            encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

def _extract_run_properties(run=None):
    """Extract loggable properties of a run, defaulting to the one in context"""
    if run is None:
        run = get_current_run()

    if run is None:
        return {}

    properties = {
        'run_id': run.run_id,
        'source': run.source,
    }
    if run.strategy:
        properties['strategy'] = run.strategy
    return properties

class AppLogger:
    """Logger that attaches the current run's context to every record"""

    def __init__(self, name: str):
        self.logger = setup_logger(name)

    def log_debug(self, message: str):
        self.logger.debug(message, extra=_extract_run_properties())

    def log_info(self, message: str):
        self.logger.info(message, extra=_extract_run_properties())

    def log_warning(self, message: str):
        self.logger.warning(message, extra=_extract_run_properties())

    def log_error(self, message: str):
        self.logger.error(message, extra=_extract_run_properties())

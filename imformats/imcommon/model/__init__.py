from .logging import initLogger, setup_logging, get_log_folder

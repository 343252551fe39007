"""Logging configuration with pretty formatting for leadrecon."""

import logging
from typing import Optional, Dict, Any
from enum import Enum, IntEnum
from datetime import datetime
from pydantic import BaseModel, Field


# ANSI Color Codes
class Colors:
    """ANSI color codes for pretty terminal output."""
    HEADER = '\033[95m'      # Pink
    INFO = '\033[94m'        # Blue
    SUCCESS = '\033[92m'     # Green
    WARNING = '\033[93m'     # Yellow
    ERROR = '\033[91m'       # Red
    RESET = '\033[0m'        # Reset
    BOLD = '\033[1m'         # Bold
    DIM = '\033[2m'          # Dim


PRETTY_FORMAT = (
    "%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s"
)

DETAILED_FORMAT = (
    f"{Colors.DIM}%(asctime)s{Colors.RESET} │ "
    f"%(colored_level)-30s │ "
    f"{Colors.DIM}%(name)s{Colors.RESET} │ "
    f"%(message)s"
)


class PrettyFormatter(logging.Formatter):
    """Formatter adding a colored level column."""

    level_colors = {
        'DEBUG': Colors.DIM,
        'VERBOSE': Colors.DIM,
        'INFO': Colors.INFO,
        'NODE': Colors.SUCCESS,
        'WARNING': Colors.WARNING,
        'ERROR': Colors.ERROR,
        'CRITICAL': Colors.ERROR + Colors.BOLD,
    }

    def format(self, record):
        color = self.level_colors.get(record.levelname, Colors.RESET)
        record.colored_level = f"{color}{record.levelname}{Colors.RESET}"

        message = super().format(record)

        # Separator after problems so they stand out in long runs
        if record.levelno >= logging.WARNING:
            message = f"{message}\n{Colors.DIM}{'─' * 80}{Colors.RESET}"

        return message


class PrettyLogHandler(logging.StreamHandler):
    """Stream handler that stamps records with a short wall-clock time."""

    def emit(self, record):
        record.asctime = datetime.fromtimestamp(record.created).strftime('%H:%M:%S')
        super().emit(record)


class LogComponent(str, Enum):
    """Components that can be logged."""
    GRAPH = "leadrecon.core.graph"
    NODES = "leadrecon.core.graph.nodes"
    BATCH = "leadrecon.core.graph.batch"
    AGENTS = "leadrecon.agents"
    INTEGRATIONS = "leadrecon.integrations"
    CONDUCTOR = "leadrecon.conductor"


class LogLevel(IntEnum):
    """Log levels mapped to logging module levels."""
    DEBUG = logging.DEBUG
    VERBOSE = 15  # Wavefront and transition chatter
    INFO = logging.INFO
    NODE = 25     # Node outputs
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL


logging.addLevelName(LogLevel.VERBOSE, "VERBOSE")
logging.addLevelName(LogLevel.NODE, "NODE")


class LeadReconLoggingConfig(BaseModel):
    """Controls how chatty a compiled graph is while it runs."""
    show_node_transitions: bool = Field(default=True)
    show_node_outputs: bool = Field(default=False)
    dump_final_state: bool = Field(default=False)


def configure_logging(
    default_level: LogLevel = LogLevel.INFO,
    component_levels: Optional[Dict[LogComponent, LogLevel]] = None,
    pretty: bool = True,
    log_file: Optional[str] = None
) -> None:
    """Configure logging with pretty formatting."""
    handlers = []

    console_handler = PrettyLogHandler() if pretty else logging.StreamHandler()
    console_handler.setFormatter(
        PrettyFormatter(DETAILED_FORMAT if pretty else PRETTY_FORMAT)
    )
    handlers.append(console_handler)

    # File output never carries colors
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(PRETTY_FORMAT))
        handlers.append(file_handler)

    root_logger = logging.getLogger()
    root_logger.setLevel(default_level.value)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    for handler in handlers:
        root_logger.addHandler(handler)

    if not component_levels:
        component_levels = {
            LogComponent.GRAPH: LogLevel.INFO,
            LogComponent.NODES: LogLevel.INFO,
            LogComponent.AGENTS: LogLevel.NODE,
            LogComponent.INTEGRATIONS: LogLevel.WARNING,
        }

    for component, level in component_levels.items():
        logging.getLogger(component.value).setLevel(level.value)


def get_logger(component: LogComponent) -> logging.Logger:
    """Get a logger for a specific component."""
    return logging.getLogger(component.value)


def log_verbose(logger: logging.Logger, message: str) -> None:
    """Log a message at VERBOSE level."""
    if logger.isEnabledFor(LogLevel.VERBOSE):
        logger.log(LogLevel.VERBOSE, message)


def log_node_output(logger: logging.Logger, node_id: str, output: Any) -> None:
    """Log what a node produced at NODE level."""
    if logger.isEnabledFor(LogLevel.NODE):
        logger.log(
            LogLevel.NODE,
            f"{Colors.BOLD}Node {node_id} output:{Colors.RESET} {output}"
        )


def log_state(logger: logging.Logger, state: Dict[str, Any], prefix: str = "") -> None:
    """Log a state dictionary in a readable format."""
    for key, value in state.items():
        if isinstance(value, dict):
            logger.debug(f"{prefix}{key}:")
            log_state(logger, value, prefix + "  ")
        else:
            logger.debug(f"{prefix}{key}: {value}")

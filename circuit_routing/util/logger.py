import sys
from typing import Optional

from loguru import logger

PALETTE = {
    "builder": "green",
    "catalog": "blue",
    "session": "magenta",
}

# Components held above the global level
LEVEL_PER_COMPONENT = {
    "builder": "INFO",
}

_sink_id: Optional[int] = None
_min_level = "DEBUG"


def component_filter(record):
    comp = record["extra"].get("component", "")
    floor = LEVEL_PER_COMPONENT.get(comp, _min_level)
    min_level = max(logger.level(floor).no, logger.level(_min_level).no)
    return record["level"].no >= min_level


def formatter(record):
    comp = record["extra"].get("component", "")
    puzzle = record["extra"].get("id", "")
    colour = PALETTE.get(comp, "white")

    label = f"{comp:<8} | {puzzle:<12}" if puzzle else f"{comp:<8}"
    return (
        "{time:HH:mm:ss} | "
        f"<{colour}>{label}</> | "
        "<level>{message}</level>\n"
    )


def configure(level: str = "DEBUG", sink=sys.stderr) -> None:
    """Replace the console sink, e.g. to quiet the CLI."""
    global _sink_id, _min_level

    _min_level = level.upper()
    if _sink_id is not None:
        logger.remove(_sink_id)
    _sink_id = logger.add(sink, format=formatter, filter=component_filter, colorize=True)


def get_logger(component: str, **extra):
    return logger.bind(component=component, **extra)


logger.remove()
configure()

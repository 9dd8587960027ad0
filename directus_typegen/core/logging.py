import logging
import sys


class ContextFormatter(logging.Formatter):
    """Formatter that fills in the optional collection and field fields."""
    def format(self, record):
        if not hasattr(record, 'collection'):
            record.collection = '-'
        if not hasattr(record, 'field'):
            record.field = '-'
        return super().format(record)


def configure_logging(level: str = "INFO") -> None:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ContextFormatter(
        "%(asctime)s %(levelname)s %(name)s [collection=%(collection)s field=%(field)s] - %(message)s"
    ))
    logging.basicConfig(
        level=level.upper(),
        handlers=[handler],
        force=True,
    )

import json
import logging
from datetime import datetime, timezone

PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str, level: str | int = logging.INFO) -> logging.Logger:
    """Logger that writes bare messages once; action lines are already JSON."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
        logger.setLevel(level)
        logger.propagate = False
    return logger


def configure_root(level: str | int = logging.INFO) -> None:
    logging.basicConfig(level=level, format=PLAIN_FORMAT, datefmt="%H:%M:%S")
    for name in logging.root.manager.loggerDict:
        if name.startswith("mailria_control"):
            logging.getLogger(name).setLevel(level)


def action_record(
    module: str,
    action: str,
    actor_role: int | None,
    target_id: int | str | None,
    outcome: str,
) -> dict:
    return {
        "ts": datetime.now(timezone.utc).isoformat(timespec="seconds"),
        "level": "INFO",
        "module": module,
        "action": action,
        "actor_role": actor_role,
        "target_id": target_id,
        "outcome": outcome,
    }


def log_action(
    logger: logging.Logger,
    module: str,
    action: str,
    actor_role: int | None,
    target_id: int | str | None,
    outcome: str,
) -> None:
    # passwords and tokens never reach this record
    logger.info(json.dumps(action_record(module, action, actor_role, target_id, outcome)))

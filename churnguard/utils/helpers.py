"""
Utility Helper Functions
========================

Common utility functions used across the project.
"""

import sys
from typing import Optional

from loguru import logger

from config import ROOT_DIR

RUPEE = "₹"


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    rotation: str = "10 MB",
    retention: str = "7 days"
):
    """
    Setup logging configuration.

    Args:
        level: Logging level
        log_file: Optional log file path
        rotation: Log rotation setting
        retention: Log retention setting
    """
    # Remove default handler
    logger.remove()

    # Add console handler
    logger.add(
        sys.stderr,
        level=level,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
    )

    # Add file handler if specified
    if log_file:
        log_path = ROOT_DIR / "logs" / log_file
        log_path.parent.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_path,
            level=level,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
            rotation=rotation,
            retention=retention,
            compression="zip"
        )

    logger.info(f"Logging configured at {level} level")


def setup_logging_from_config(config: dict):
    """Setup logging from the ``logging`` section of the configuration."""
    log_config = config.get("logging", {})
    setup_logging(
        level=log_config.get("level", "INFO"),
        log_file=log_config.get("file"),
    )


def _group_indian(digits: str) -> str:
    # Last three digits, then groups of two: 12,34,567
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_inr(amount: float, decimals: int = 0) -> str:
    """
    Format an amount as Indian rupees.

    Args:
        amount: Monetary amount
        decimals: Digits after the decimal point (2 renders paise)

    Returns:
        Formatted string, e.g. ``₹7,12,345`` or ``₹1,250.40``
    """
    scale = 10 ** decimals
    scaled = int(round(abs(amount) * scale))
    whole, fraction = divmod(scaled, scale)
    sign = "-" if amount < 0 and scaled else ""
    text = f"{sign}{RUPEE}{_group_indian(str(whole))}"
    if decimals:
        text += f".{fraction:0{decimals}d}"
    return text


def format_inr_exact(amount: float) -> str:
    """Format an amount in rupees, keeping paise only when the amount has them."""
    return format_inr(amount, decimals=0 if float(amount).is_integer() else 2)


def format_percentage(value: float, precision: int = 2) -> str:
    """Format a 0-1 fraction as a percentage string."""
    return f"{value * 100:.{precision}f}%"

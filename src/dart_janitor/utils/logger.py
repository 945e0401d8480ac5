"""Logging setup and terminal-safe text handling.

Library modules log through the ``dart_janitor`` logger hierarchy; the CLI
attaches a Rich handler on stderr so stdout stays clean for JSON reports.
Icons are swapped for ASCII on terminals that can't render UTF-8.
"""
import locale
import logging
import sys
from typing import Optional

from rich.logging import RichHandler

LOGGER_NAME = "dart_janitor"

# Unicode to ASCII icon mapping for legacy terminals
ICON_MAP = {
    '✓': '[OK]',
    '✗': '[FAIL]',
    '⚠': '[WARN]',
    '→': '->',
    '•': '*',
    '…': '...',
    '🧹': '[janitor]',
    '📦': '[pkg]',
    '📄': '[file]',
    '🖼': '[asset]',
}


def detect_terminal_encoding() -> str:
    """Detect the terminal's encoding capability.

    Returns:
        str: Terminal encoding ('utf-8', 'cp1252', 'ascii', etc.)
    """
    if getattr(sys.stdout, 'encoding', None):
        return sys.stdout.encoding.lower()

    try:
        return locale.getpreferredencoding().lower()
    except (ValueError, LookupError):
        return 'ascii'


def is_utf8_capable() -> bool:
    """Check if the terminal can handle UTF-8 Unicode characters."""
    return detect_terminal_encoding().replace('-', '').replace('_', '') == 'utf8'


def sanitize_for_terminal(text: str) -> str:
    """Replace Unicode icons with ASCII equivalents if terminal doesn't support UTF-8.

    Args:
        text: Text potentially containing Unicode icons

    Returns:
        str: Sanitized text safe for current terminal
    """
    if is_utf8_capable():
        return text

    for unicode_char, ascii_replacement in ICON_MAP.items():
        text = text.replace(unicode_char, ascii_replacement)
    return text


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module-scoped logger under the dart_janitor hierarchy."""
    return logging.getLogger(f"{LOGGER_NAME}.{name}" if name else LOGGER_NAME)


def configure_logging(verbose: bool = False) -> logging.Logger:
    """Attach a stderr Rich handler to the package logger.

    Args:
        verbose: Log at DEBUG instead of WARNING

    Returns:
        The configured package logger
    """
    # Imported here: safe_console imports this module for sanitize_for_terminal
    from .safe_console import SafeConsole

    level = logging.DEBUG if verbose else logging.WARNING
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers so repeated CLI invocations don't duplicate output
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = RichHandler(
        console=SafeConsole(stderr=True),
        show_path=False,
        show_time=verbose,
        markup=False,
    )
    handler.setLevel(level)
    logger.addHandler(handler)
    return logger

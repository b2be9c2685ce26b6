"""Centralized error handler for compdbgen commands."""

import traceback
from collections.abc import Callable
from datetime import datetime
from functools import wraps
from typing import Any

import click

from compdbgen.exceptions import CompdbgenError
from compdbgen.utils.logging import logger

from .constants import ERROR_LOG_FILE
from .exit_codes import ExitCodes


def handle_exceptions(func: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator that turns uncaught errors into a logged ClickException."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        """Inner wrapper that implements the try-except logic."""
        try:
            return func(*args, **kwargs)
        except click.exceptions.Exit:
            raise
        except click.ClickException:
            raise
        except CompdbgenError as e:
            # Expected fatal conditions: no traceback noise
            logger.error("Command '{cmd}' failed: {err}", cmd=func.__name__, err=str(e))
            exc = click.ClickException(str(e))
            exc.exit_code = ExitCodes.FATAL
            raise exc from e
        except Exception as e:
            error_type = type(e).__name__
            error_msg = str(e)
            tb = traceback.format_exc()

            logger.opt(exception=True).error(
                "Command '{cmd}' failed: {err}",
                cmd=func.__name__,
                err=error_msg,
            )

            with open(ERROR_LOG_FILE, "a", encoding="utf-8") as f:
                f.write("\n" + "=" * 80 + "\n")
                f.write(f"[{datetime.now().isoformat()}] Error in command: {func.__name__}\n")
                f.write("=" * 80 + "\n")
                f.write(f"{error_type}: {error_msg}\n\n")
                f.write(tb)
                f.write("=" * 80 + "\n\n")

            user_message = (
                f"{error_type}: {error_msg}\n\n"
                f"Full traceback logged to: {ERROR_LOG_FILE}"
            )
            exc = click.ClickException(user_message)
            exc.exit_code = ExitCodes.FATAL
            raise exc from e

    return wrapper

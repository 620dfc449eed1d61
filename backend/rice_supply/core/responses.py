"""Response Formatter — the uniform success/error envelope.

Invariants:
    - Success: {success: true, message, data, timestamp}
    - Error:   {success: false, message, timestamp}
    - `error` and `stack` are added only when development=True; production
      responses reveal nothing beyond `message`
"""

import traceback
from datetime import datetime, timezone
from typing import Any


def response_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace(
        "+00:00", "Z",
    )


def format_success(data: Any, message: str = "Success") -> dict:
    return {
        "success": True,
        "message": message,
        "data": data,
        "timestamp": response_timestamp(),
    }


def format_error(
    message: str, exc: BaseException | None = None, development: bool = False,
) -> dict:
    response: dict[str, Any] = {
        "success": False,
        "message": message,
        "timestamp": response_timestamp(),
    }
    if development and exc is not None:
        response["error"] = str(exc)
        response["stack"] = "".join(
            traceback.format_exception(type(exc), exc, exc.__traceback__),
        )
    return response

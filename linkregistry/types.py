from collections.abc import Callable
from datetime import datetime
from typing import Any, TypeAlias


# Source of the current time (timezone-aware UTC)
Clock: TypeAlias = Callable[[], datetime]

# JSON-serializable payloads handed to transport layers
JSONDict: TypeAlias = dict[str, Any]

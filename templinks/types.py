from collections.abc import Callable
from datetime import datetime
from typing import Any


# Type aliases for Python dictionaries
type LambdaEvent = dict[str, Any]
type LambdaContext = Any
type LambdaResponse = dict[str, Any]
type AppConfig = dict[str, Any]

# Callable returning the current aware UTC timestamp
type Clock = Callable[[], datetime]

from dataclasses import dataclass
from typing import Optional


@dataclass
class MalformedInputError(Exception):
    message: str = "The provided mangle is not valid"
    remaining: Optional[str] = None

    def __str__(self) -> str:
        if self.remaining is None:
            return self.message
        return f"{self.message} (at {self.remaining!r})"

from dataclasses import dataclass
from pathlib import Path
from typing import List


@dataclass
class Options:
    # Mangled names given on the command line; "-" means read from stdin
    symbols: List[str]
    filenames: List[Path]
    debug: bool
    stop_on_error: bool
    keep_mangled: bool
    show_mangled: bool

    def format_result(self, mangled: str, text: str) -> str:
        if self.show_mangled:
            return f"{mangled}\n{text}"
        return text

    def format_failure(self, mangled: str, message: str) -> str:
        if self.keep_mangled:
            return mangled
        return f"/* {message}: {mangled} */"

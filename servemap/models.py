from dataclasses import dataclass
from pathlib import Path

@dataclass(frozen=True)
class SaveCandidate:
    path: Path
    modified_ns: int            # st_mtime_ns

"""Launch log records written once per started child."""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, TextIO
import json
import re

LOG_LINE_FORMAT = "child started: {num}, {sec}, {nsec}, pid={pid}, '{cmd}'\n"

_LOG_LINE_RE = re.compile(
    r"^child started: (?P<num>\d+), (?P<sec>\d+), (?P<nsec>\d+), "
    r"pid=(?P<pid>-?\d+), '(?P<cmd>.*)'$"
)


@dataclass(frozen=True)
class LaunchRecord:
    """Raw timing facts about one launched child."""

    num: int
    sec: int
    nsec: int
    pid: int
    cmd: str

    def to_log_line(self) -> str:
        return LOG_LINE_FORMAT.format(
            num=self.num, sec=self.sec, nsec=self.nsec, pid=self.pid, cmd=self.cmd
        )

    @classmethod
    def parse_log_line(cls, line: str) -> "LaunchRecord | None":
        """Parse a launch log line; return None for lines of another kind."""
        match = _LOG_LINE_RE.match(line.rstrip("\n"))
        if match is None:
            return None
        return cls(
            num=int(match["num"]),
            sec=int(match["sec"]),
            nsec=int(match["nsec"]),
            pid=int(match["pid"]),
            cmd=match["cmd"],
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


def emit_launch(stream: TextIO, record: LaunchRecord) -> None:
    """Append the record to the launch log and push it out immediately."""
    stream.write(record.to_log_line())
    stream.flush()

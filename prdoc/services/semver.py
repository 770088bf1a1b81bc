from __future__ import annotations

import re
from dataclasses import dataclass

from prdoc.records.model import BumpLevel


_VERSION_RE = re.compile(r"^v?(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)$")


@dataclass(frozen=True, slots=True, order=True)
class SemVer:
    major: int
    minor: int
    patch: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    def bump(self, kind: BumpLevel) -> SemVer:
        """Apply a bump using Cargo's compatibility rules.

        Below 1.0.0 the leftmost non-zero component is the breaking one, so a
        major bump of 0.3.1 gives 0.4.0 and minor/patch bumps give 0.3.2.
        """
        if self.major == 0:
            match kind:
                case "major":
                    if self.minor == 0:
                        return SemVer(0, 0, self.patch + 1)
                    return SemVer(0, self.minor + 1, 0)
                case "minor" | "patch":
                    return SemVer(0, self.minor, self.patch + 1)
                case _:
                    raise AssertionError(f"unexpected bump kind: {kind}")

        match kind:
            case "major":
                return SemVer(self.major + 1, 0, 0)
            case "minor":
                return SemVer(self.major, self.minor + 1, 0)
            case "patch":
                return SemVer(self.major, self.minor, self.patch + 1)
            case _:
                raise AssertionError(f"unexpected bump kind: {kind}")


def parse_version(text: str) -> SemVer | None:
    m = _VERSION_RE.match(text.strip())
    if m is None:
        return None
    return SemVer(int(m.group(1)), int(m.group(2)), int(m.group(3)))

# gauqchem/errors.py

from __future__ import annotations

from typing import Optional


class BridgeError(Exception):
    """Base class for every failure the bridge reports to Gaussian."""


# ---------------------------------------------------------------------
# Request file (Gaussian -> bridge)
# ---------------------------------------------------------------------
class RequestFormatError(BridgeError, ValueError):
    pass


class CountMismatch(RequestFormatError):
    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"expected {expected} values, got {actual}")


class MalformedToken(RequestFormatError):
    def __init__(self, token: str, kind: str) -> None:
        self.token = token
        self.kind = kind
        super().__init__(f"failed to parse {token!r} as {kind}")


class TruncatedHeader(RequestFormatError):
    pass


class TruncatedBody(RequestFormatError):
    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Gaussian input file is truncated: expected {expected} atom lines, got {actual}"
        )


class MalformedAtomLine(RequestFormatError):
    def __init__(self, index: int, reason: str) -> None:
        self.index = index
        super().__init__(f"atom {index}: {reason}")


# ---------------------------------------------------------------------
# Worker (Q-Chem)
# ---------------------------------------------------------------------
class WorkerInvocationError(BridgeError, RuntimeError):
    def __init__(self, message: str, returncode: Optional[int] = None, output_tail: str = "") -> None:
        self.returncode = returncode
        self.output_tail = output_tail
        if output_tail:
            message = f"{message}\n--- last lines of worker log ---\n{output_tail}"
        super().__init__(message)


class ReportParseError(BridgeError, ValueError):
    pass


class EnergyTagNotFound(ReportParseError):
    pass


class EnergyParseError(ReportParseError):
    pass


class SectionError(ReportParseError):
    def __init__(self, tag: str, reason: str) -> None:
        self.tag = tag
        super().__init__(f"section '{tag}': {reason}")


class SectionNotFound(SectionError):
    def __init__(self, tag: str) -> None:
        super().__init__(tag, "not found in Q-Chem output")


class SectionTruncated(SectionError):
    def __init__(self, tag: str, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(tag, f"expected {expected} values, got {actual}")


class SectionMalformed(SectionError):
    pass


# ---------------------------------------------------------------------
# Internal
# ---------------------------------------------------------------------
class EncodingError(BridgeError):
    pass


class ConfigError(BridgeError, ValueError):
    pass

"""Helper modules for the login format prober."""

from .attempt import ProbeAttempt, ProbeResult
from .candidate_runner import attempt_login, attempt_without_login

__all__ = ["ProbeAttempt", "ProbeResult", "attempt_login", "attempt_without_login"]

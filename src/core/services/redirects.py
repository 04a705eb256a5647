"""Redirect safety policy.

Only read-only requests are replayed against a redirect target. Replaying a
`POST`/`PUT`/`DELETE` could run the operation against another resource or
another daemon, so those surface as `RedirectRefusedError` instead.
"""

from __future__ import annotations

from core.domain.models import RedirectDecision
from core.errors import RedirectRefusedError

SAFE_REDIRECT_METHODS = frozenset({"GET", "HEAD"})


def decide_redirect(method: str, location: str) -> RedirectDecision:
    """Decide whether a redirect of a `method` request to `location` is followed."""

    if method.upper() in SAFE_REDIRECT_METHODS:
        return RedirectDecision(follow=True)
    return RedirectDecision(follow=False, error=RedirectRefusedError(method.upper(), location))

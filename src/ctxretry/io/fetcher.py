"""HTTP fetch helpers bounded by a retry policy and a caller deadline."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from contextlib import ExitStack
from pathlib import Path
from typing import Optional

import requests

from ctxretry.config.models import RetryPolicyConfig
from ctxretry.context import Context, background, with_timeout
from ctxretry.retry import retry_with_policy

LOGGER = logging.getLogger(__name__)

DEFAULT_HEADERS: Mapping[str, str] = {
    "User-Agent": "ctxretry/0.1",
    "Accept": "*/*",
}


def build_session(headers: Mapping[str, str] | None = None) -> requests.Session:
    """Return a session carrying ``DEFAULT_HEADERS`` merged with ``headers``."""

    session = requests.Session()
    session.headers.update(DEFAULT_HEADERS)
    if headers:
        session.headers.update(headers)
    return session


def fetch(
    url: str,
    *,
    ctx: Optional[Context] = None,
    policy: Optional[RetryPolicyConfig] = None,
    session: Optional[requests.Session] = None,
    headers: Mapping[str, str] | None = None,
    method: str = "GET",
    stream: bool = False,
) -> requests.Response:
    """Request ``url`` until a non-error response arrives or the policy gives up.

    Any exception, including an HTTP error status, counts as a failed
    attempt. Without ``ctx`` a context is derived from the policy's
    ``deadline_seconds``; with neither, the retry refuses to start.

    A session created here is closed on return. Pass ``session`` when the
    body of a ``stream=True`` response is read after this call.
    """

    policy = policy or RetryPolicyConfig()

    with ExitStack() as stack:
        if session is None:
            session = stack.enter_context(build_session())
        if ctx is None:
            ctx = background()
            if policy.deadline_seconds is not None:
                ctx = with_timeout(ctx, policy.deadline_seconds)
            stack.enter_context(ctx)

        attempts = 0

        def _request() -> requests.Response:
            nonlocal attempts
            attempts += 1
            timeout = policy.request_timeout_seconds
            remaining = ctx.remaining()
            if remaining is not None:
                if remaining <= 0:
                    raise ctx.error()
                timeout = min(timeout, remaining)

            LOGGER.debug("%s %s attempt=%s timeout=%.3f", method, url, attempts, timeout)
            response = session.request(
                method, url, headers=dict(headers or {}), timeout=timeout, stream=stream
            )
            try:
                response.raise_for_status()
            except requests.HTTPError:
                response.close()
                raise
            return response

        response = retry_with_policy(ctx, _request, policy)
        LOGGER.debug("%s %s -> %s after %s attempt(s)", method, url, response.status_code, attempts)
        return response


def fetch_file(
    url: str,
    dest: Path,
    *,
    ctx: Optional[Context] = None,
    policy: Optional[RetryPolicyConfig] = None,
    session: Optional[requests.Session] = None,
    headers: Mapping[str, str] | None = None,
) -> Path:
    """Stream ``url`` to ``dest`` atomically once :func:`fetch` succeeds."""

    with ExitStack() as stack:
        if session is None:
            session = stack.enter_context(build_session())
        response = stack.enter_context(
            fetch(url, ctx=ctx, policy=policy, session=session, headers=headers, stream=True)
        )

        dest.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = dest.with_suffix(dest.suffix + ".download")
        try:
            with tmp_path.open("wb") as handle:
                for chunk in response.iter_content(chunk_size=8192):
                    if chunk:
                        handle.write(chunk)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise
        tmp_path.replace(dest)
    return dest


__all__ = ["DEFAULT_HEADERS", "build_session", "fetch", "fetch_file"]

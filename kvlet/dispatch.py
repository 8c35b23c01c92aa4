"""Notification dispatcher for kvlet."""

from __future__ import annotations

import logging
from typing import Any, Optional, Protocol

import requests
import urllib3

from .contracts import Method, NotifyTarget, Outcome
from .exceptions import DispatchError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class HttpSession(Protocol):
    """Minimal HTTP client capability; ``requests.Session`` satisfies it."""

    def request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        ...


class NotificationDispatcher:
    """Perform one synchronous outbound call per state change."""

    def __init__(
        self,
        session: Optional[HttpSession] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._session = session or requests.Session()
        self.timeout = timeout

    def _build_request(
        self, record_id: str, state: str, info: Optional[str], target: NotifyTarget
    ) -> dict[str, Any]:
        request: dict[str, Any] = {
            "method": target.method.value,
            "url": target.endpoint,
            "params": {"id": record_id, "state": state},
            "timeout": self.timeout,
        }
        if target.method is Method.POST:
            request["json"] = {"id": record_id, "state": state, "info": info or ""}
        return request

    def dispatch(
        self,
        record_id: str,
        state: str,
        info: Optional[str],
        target: Optional[NotifyTarget],
    ) -> Outcome | None:
        """Notify ``target`` that ``record_id`` moved to ``state``.

        GET sends ``id`` and ``state`` as query parameters. POST sends the
        same query parameters plus a JSON body with ``id``, ``state`` and
        ``info``. A missing target or ``Method.NONE`` is a no-op and returns
        ``None``.

        Any HTTP status, including 4xx/5xx, is a valid ``Outcome``. Only
        transport failures raise ``DispatchError``.
        """
        if target is None or not target.dispatches:
            logger.debug(f"No notification target for {record_id}, skipping dispatch")
            return None

        request = self._build_request(record_id, state, info, target)
        logger.info(f"{target.method.value} {target.endpoint} id={record_id} state={state}")
        try:
            response = self._session.request(**request)
            body = response.text
        except (requests.RequestException, urllib3.exceptions.HTTPError) as exc:
            logger.warning(
                f"Notification to {target.endpoint} for {record_id} failed: {exc}"
            )
            raise DispatchError(
                f"{target.method.value} {target.endpoint} failed: {exc}",
                endpoint=target.endpoint,
            ) from exc

        logger.info(f"Status: {response.status_code}")
        logger.debug(f"Body:\n{body}")
        return Outcome(status_code=response.status_code, body=body)

    def close(self) -> None:
        close = getattr(self._session, "close", None)
        if close is not None:
            close()

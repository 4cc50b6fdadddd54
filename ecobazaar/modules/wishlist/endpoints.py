"""
Endpoint resolution for operations whose server route is not known.

Some backends expose wishlist removal as DELETE /wishlist/{userId}/{productId},
others use query parameters. EndpointResolver tries an ordered list of
candidate request shapes, one at a time, and accepts the first that does not
fail. Each candidate moves NOT_TRIED -> TRYING -> SUCCEEDED | FAILED and is
tried at most once per call.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, Sequence

from ecobazaar.shared.exceptions import ApiError, AuthExpiredError, EcobazaarError

from .exceptions import ContractMismatchError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestShape:
    """One concrete request a candidate would send."""

    method: str
    path: str
    query: Optional[dict[str, Any]] = None
    body: Any = None

    def describe(self) -> str:
        if not self.query:
            return f"{self.method} {self.path}"
        params = "&".join(f"{k}={v}" for k, v in self.query.items())
        return f"{self.method} {self.path}?{params}"


@dataclass(frozen=True)
class EndpointCandidate:
    """Named builder turning operation parameters into a RequestShape."""

    name: str
    build: Callable[..., RequestShape]


class CandidateStatus(str, Enum):
    NOT_TRIED = "not_tried"
    TRYING = "trying"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class CandidateAttempt:
    """Outcome of one candidate within one resolution. Also the debug trace record."""

    candidate: str
    request: RequestShape
    status: CandidateStatus = CandidateStatus.NOT_TRIED
    http_status: Optional[int] = None
    error: Optional[str] = None


@dataclass
class Resolution:
    """Successful resolution: the accepted response and every attempt made."""

    operation: str
    attempts: list[CandidateAttempt]
    response: Any = None

    @property
    def winner(self) -> CandidateAttempt:
        return next(a for a in self.attempts if a.status is CandidateStatus.SUCCEEDED)


RequestSender = Callable[[RequestShape], Awaitable[Any]]
AttemptObserver = Callable[[CandidateAttempt], None]


class EndpointResolver:
    """
    Tries candidates strictly in order, never two at once.

    Args:
        operation: Name used in logs and the aggregate error
        candidates: Request shapes in priority order
        abort_on: Exceptions that stop probing immediately and propagate.
                  A 401 means the session is gone, so later shapes cannot
                  succeed either.
    """

    def __init__(
        self,
        operation: str,
        candidates: Sequence[EndpointCandidate],
        abort_on: tuple[type[BaseException], ...] = (AuthExpiredError,),
    ):
        if not candidates:
            raise ValueError("EndpointResolver needs at least one candidate")
        self._operation = operation
        self._candidates = list(candidates)
        self._abort_on = abort_on

    @property
    def candidates(self) -> list[EndpointCandidate]:
        return list(self._candidates)

    async def resolve(
        self,
        send: RequestSender,
        observer: Optional[AttemptObserver] = None,
        **params: Any,
    ) -> Resolution:
        """
        Run the candidates against `send`.

        Returns:
            Resolution with the first successful response

        Raises:
            ContractMismatchError: Every candidate failed
            Any exception in `abort_on`, unchanged
        """
        attempts = [
            CandidateAttempt(candidate=c.name, request=c.build(**params))
            for c in self._candidates
        ]

        for attempt in attempts:
            attempt.status = CandidateStatus.TRYING
            logger.debug(f"Trying endpoint: {attempt.request.describe()}")
            try:
                response = await send(attempt.request)
            except self._abort_on as e:
                self._fail(attempt, e, observer)
                raise
            except EcobazaarError as e:
                self._fail(attempt, e, observer)
                logger.debug(
                    f"Failed with: {attempt.request.describe()} - {attempt.http_status or attempt.error}"
                )
                continue

            attempt.status = CandidateStatus.SUCCEEDED
            if observer:
                observer(attempt)
            logger.info(f"{self._operation}: success with {attempt.request.describe()}")
            return Resolution(operation=self._operation, attempts=attempts, response=response)

        logger.warning(f"{self._operation}: all {len(attempts)} endpoint patterns failed")
        raise ContractMismatchError(self._operation, attempts)

    @staticmethod
    def _fail(
        attempt: CandidateAttempt,
        error: BaseException,
        observer: Optional[AttemptObserver],
    ) -> None:
        attempt.status = CandidateStatus.FAILED
        attempt.http_status = error.status if isinstance(error, ApiError) else None
        attempt.error = str(error)
        if observer:
            observer(attempt)


def _path_param(user_id: Any, product_id: Any) -> RequestShape:
    return RequestShape("DELETE", f"/wishlist/{user_id}/{product_id}")


def _query_param(user_id: Any, product_id: Any) -> RequestShape:
    return RequestShape(
        "DELETE", "/wishlist/remove", query={"userId": user_id, "productId": product_id}
    )


def _root_with_query(user_id: Any, product_id: Any) -> RequestShape:
    return RequestShape("DELETE", f"/wishlist/{user_id}", query={"productId": product_id})


WISHLIST_REMOVAL_CANDIDATES: tuple[EndpointCandidate, ...] = (
    EndpointCandidate("path-param", _path_param),
    EndpointCandidate("query-param", _query_param),
    EndpointCandidate("root-with-query", _root_with_query),
)


def wishlist_removal_resolver() -> EndpointResolver:
    return EndpointResolver("wishlist removal", WISHLIST_REMOVAL_CANDIDATES)

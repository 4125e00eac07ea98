"""
Advisory move suggestions from a remote service.

A suggester may propose a move for a position, but it is never trusted:
the game engine re-validates every suggestion against the current legal
moves and falls back to its own strategy on any failure. A suggester
therefore reports every problem (network error, timeout, unknown position,
malformed payload) as None rather than raising.
"""

import logging
from typing import Protocol

import requests

from engine.constants import LICHESS_API_URL, SUGGESTION_TIMEOUT, USER_AGENT

_log = logging.getLogger(__name__)


class MoveSuggester(Protocol):
    def suggest(self, fen: str) -> str | None:
        """Return a suggested move (SAN or UCI) for fen, or None if unavailable."""
        ...


class LichessSuggester:
    """
    Client for the Lichess cloud evaluation API.

    The endpoint only answers for positions already present in the Lichess
    cloud database; anything else comes back as 404, which is reported as
    "unavailable" like every other failure.
    """

    def __init__(
        self,
        base_url: str = LICHESS_API_URL,
        timeout: float = SUGGESTION_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        })

    def suggest(self, fen: str) -> str | None:
        """
        First move of the best principal variation, in UCI notation.

        Returns:
            A move such as "e2e4", or None when the service is unreachable,
            slow, does not know the position, or answers with an unexpected
            payload.
        """
        url = f"{self.base_url}/cloud-eval"
        try:
            response = self.session.get(
                url,
                params={"fen": fen, "multiPv": 1},
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.HTTPError as e:
            if e.response is not None and e.response.status_code == 404:
                _log.debug("No cloud evaluation for %s", fen)
            else:
                _log.warning("HTTP error fetching suggestion: %s", e)
            return None
        except ValueError as e:
            # requests raises its JSONDecodeError, a ValueError, for bad bodies.
            _log.warning("Suggestion service returned invalid JSON: %s", e)
            return None
        except requests.exceptions.RequestException as e:
            _log.warning("Suggestion service unreachable: %s", e)
            return None

        try:
            moves = data["pvs"][0]["moves"]
        except (KeyError, IndexError, TypeError):
            _log.warning("Suggestion payload has no principal variation")
            return None

        if not isinstance(moves, str) or not moves.split():
            return None
        return moves.split()[0]

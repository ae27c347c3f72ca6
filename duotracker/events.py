"""Event system decoupling the scheduler from presentation.

The scheduler emits events without knowing about Discord, embeds or
leaderboards; presentation layers subscribe by implementing
``EventHandler`` and render them as they see fit.
"""

from typing import TYPE_CHECKING, Any, Protocol

from duotracker.models import Duo, MatchRecord

if TYPE_CHECKING:
    from duotracker.scheduler import PollSummary
    from duotracker.scoring.models import ScoreResult


class EventHandler(Protocol):
    """Protocol for handlers of scheduler events."""

    def on_match_found(
        self,
        duo: Duo,
        match: MatchRecord,
        **kwargs: Any
    ) -> None:
        """Called when a new qualifying match has been stored, before scoring."""
        ...

    def on_match_scored(
        self,
        duo: Duo,
        match: MatchRecord,
        result: "ScoreResult",
        **kwargs: Any
    ) -> None:
        """Called once a match has been scored and the records updated.

        Args:
            duo: The pair, with totals already updated
            match: The match record (``scored`` is True)
            result: Full point breakdown and alerts
            **kwargs: Additional context
        """
        ...

    def on_pair_error(
        self,
        duo: Duo,
        error: Exception,
        **kwargs: Any
    ) -> None:
        """Called when a pair was skipped for this cycle because of an API error."""
        ...

    def on_poll_complete(
        self,
        summary: "PollSummary",
        **kwargs: Any
    ) -> None:
        """Called at the end of every poll cycle."""
        ...


class NullEventHandler:
    """Event handler that does nothing."""

    def on_match_found(self, *args: Any, **kwargs: Any) -> None:
        pass

    def on_match_scored(self, *args: Any, **kwargs: Any) -> None:
        pass

    def on_pair_error(self, *args: Any, **kwargs: Any) -> None:
        pass

    def on_poll_complete(self, *args: Any, **kwargs: Any) -> None:
        pass

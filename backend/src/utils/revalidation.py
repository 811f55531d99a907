"""
View invalidation tokens.

Mutations that change what a dashboard view shows record an opaque path
token (``/events/{event_guid}/budget``, ``/people/staff``, ...). The API
returns the collected tokens in ``ActionResult.revalidate`` so clients
know which cached views to refetch. Tokens are only recorded after the
owning transaction has committed.
"""

from typing import List, Optional


STAFF_LIST = "/people/staff"
DASHBOARD = "/"


def staff_detail(staff_guid: str) -> str:
    return f"/people/staff/{staff_guid}"


def event_detail(event_guid: str) -> str:
    return f"/events/{event_guid}"


def event_staff(event_guid: str) -> str:
    return f"/events/{event_guid}/staff"


def event_budget(event_guid: str) -> str:
    return f"/events/{event_guid}/budget"


def event_sponsors(event_guid: str) -> str:
    return f"/events/{event_guid}/sponsors"


def event_agenda(event_guid: str) -> str:
    return f"/events/{event_guid}/agenda"


class ViewRevalidator:
    """
    Ordered, de-duplicated collection of invalidation tokens.

    Each service instance owns one revalidator; the API layer drains it
    into the response after a successful call.

    Usage:
        >>> revalidator = ViewRevalidator()
        >>> revalidator.revalidate_path("/people/staff")
        >>> revalidator.revalidate_path("/people/staff")
        >>> revalidator.drain()
        ['/people/staff']
        >>> revalidator.drain()
        []
    """

    def __init__(self):
        self._paths: List[str] = []

    def revalidate_path(self, path: Optional[str]) -> None:
        """Record a token; duplicates and empty values are ignored."""
        if path and path not in self._paths:
            self._paths.append(path)

    def revalidate_paths(self, *paths: Optional[str]) -> None:
        for path in paths:
            self.revalidate_path(path)

    @property
    def paths(self) -> List[str]:
        return list(self._paths)

    def drain(self) -> List[str]:
        """Return the recorded tokens and reset the collection."""
        paths, self._paths = self._paths, []
        return paths

from dataclasses import dataclass, replace

MAX_PAGE_SIZE = 100


@dataclass(frozen=True)
class RecordQuery:
    """Parameters for a paged read: optional substring search, ordering, window."""

    search: str = ""
    limit: int = MAX_PAGE_SIZE
    offset: int = 0
    descending: bool = True

    def normalized(self, cap: int = MAX_PAGE_SIZE) -> "RecordQuery":
        limit = max(1, min(int(self.limit), cap))
        return replace(
            self,
            search=(self.search or "").strip(),
            limit=limit,
            offset=max(0, int(self.offset)),
        )

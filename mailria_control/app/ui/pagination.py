from __future__ import annotations

from dataclasses import dataclass

ELLIPSIS = "..."
WINDOW_SIZE = 5


@dataclass(frozen=True)
class PaginationView:
    page: int
    total_pages: int

    @classmethod
    def from_store(cls, store) -> "PaginationView":
        return cls(page=store.page, total_pages=max(1, store.total_pages))

    @property
    def show_controls(self) -> bool:
        return self.total_pages > 1

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    def items(self) -> list[int | str]:
        """Numbered links around the current page, with ellipsis where pages are skipped."""
        if self.total_pages <= WINDOW_SIZE:
            return list(range(1, self.total_pages + 1))

        current = min(max(self.page, 1), self.total_pages)
        start = max(1, current - WINDOW_SIZE // 2)
        end = min(self.total_pages, start + WINDOW_SIZE - 1)
        start = max(1, end - WINDOW_SIZE + 1)

        items: list[int | str] = []
        if start > 1:
            items.append(ELLIPSIS)
        items.extend(range(start, end + 1))
        if end < self.total_pages:
            items.append(ELLIPSIS)
        return items

    def jump_target(self, raw: str | int | None) -> int | None:
        try:
            target = int(raw) if raw is not None else None
        except (TypeError, ValueError):
            return None
        if target is None or not 3 < target < self.total_pages:
            return None
        return target

    def render(self) -> str:
        if not self.show_controls:
            return ""
        parts = [f"[{item}]" if item == self.page else str(item) for item in self.items()]
        return f"Page {self.page}/{self.total_pages}: " + " ".join(parts)

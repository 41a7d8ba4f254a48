from __future__ import annotations

from mailria_control.app.ui.listing_view import EMPTY_VALUE


def print_table(title: str, rows: list[dict[str, str]], columns: list[tuple[str, str]]) -> None:
    print(f"\n{title}")
    if not rows:
        print("(no results)")
        return

    widths = [max(len(header), *(len(row.get(key, EMPTY_VALUE)) for row in rows)) for key, header in columns]

    print(" | ".join(header.ljust(widths[idx]) for idx, (_, header) in enumerate(columns)))
    print("-+-".join("-" * width for width in widths))
    for row in rows:
        print(" | ".join(row.get(key, EMPTY_VALUE).ljust(widths[idx]) for idx, (key, _) in enumerate(columns)))

import json
from pathlib import Path
from typing import Any, Iterable, List

from wishlistwizard.core.constants import CSV_BASE_COLUMNS
from wishlistwizard.core.logging import log
from wishlistwizard.core.models import WishlistItem


def safe_read_json(path: Path, default: Any = None) -> Any:
    """
    Safely read a JSON file with robust error handling.
    """
    if default is None:
        default = {}

    try:
        if path.exists():
            content = path.read_text(encoding="utf-8")
            if not content.strip():
                return default
            return json.loads(content)
    except json.JSONDecodeError as e:
        log(f"Corrupted JSON in {path.name}: {e}", level="error")
    except PermissionError as e:
        log(f"Permission denied reading {path.name}: {e}", level="error")
    except OSError as e:
        log(f"IO error reading {path.name}: {e}", level="warning")

    return default


def escape_csv_field(field: str) -> str:
    if '"' in field or "," in field or "\n" in field:
        return '"' + field.replace('"', '""') + '"'
    return field


def encode_csv(items: Iterable[WishlistItem]) -> str:
    """
    Encode wishlist items as a CSV document.

    The header carries one "Option N" column per option of the widest item;
    narrower items are padded with empty fields. Rows are joined with "\\n"
    and there is no trailing newline.
    """
    items = list(items)
    max_options = max((len(item.options) for item in items), default=0)

    header = CSV_BASE_COLUMNS + [f"Option {i}" for i in range(1, max_options + 1)]
    rows: List[str] = [",".join(escape_csv_field(col) for col in header)]

    for item in items:
        options = item.options + [""] * (max_options - len(item.options))
        fields = [item.name, item.manufacturer, item.product_link, item.external_link] + options
        rows.append(",".join(escape_csv_field(f) for f in fields))

    return "\n".join(rows)


def write_csv(path: Path, items: Iterable[WishlistItem]) -> Path:
    """Write items to path as UTF-8 CSV. IO errors propagate to the caller."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(encode_csv(items).encode("utf-8"))
    return path

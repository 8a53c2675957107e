"""Editor for scan options."""

from dataclasses import dataclass
from enum import Enum

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ctxgen.filesystem.errors import InvalidSizeLimitError
from ctxgen.filesystem.models import ScanOptions, SortKey
from ctxgen.filesystem.patterns import is_valid_pattern
from ctxgen.filesystem.sizes import parse_size
from ctxgen.tui.views.base import Intent, SettingsApplied

HELP = "↑↓ move  enter edit/toggle  a apply  s apply+save  esc discard"


class FieldKind(str, Enum):
    """How a settings field is edited."""

    NUMBER = "number"
    SIZE = "size"
    PATTERNS = "patterns"
    FLAG = "flag"
    CHOICE = "choice"


@dataclass(frozen=True, slots=True)
class SettingsField:
    """One editable row of the settings screen."""

    name: str
    label: str
    kind: FieldKind


FIELDS: tuple[SettingsField, ...] = (
    SettingsField("max_depth", "Max depth", FieldKind.NUMBER),
    SettingsField("max_file_size", "Max file size", FieldKind.SIZE),
    SettingsField("include_patterns", "Include patterns", FieldKind.PATTERNS),
    SettingsField("exclude_patterns", "Exclude patterns", FieldKind.PATTERNS),
    SettingsField("follow_symlinks", "Follow symlinks", FieldKind.FLAG),
    SettingsField("show_hidden", "Show hidden", FieldKind.FLAG),
    SettingsField("exclude_binary", "Exclude binary", FieldKind.FLAG),
    SettingsField("recursive", "Recursive", FieldKind.FLAG),
    SettingsField("sort_by", "Sort by", FieldKind.CHOICE),
)

_SORT_ORDER = list(SortKey)


def format_value(options: ScanOptions, field: SettingsField) -> str:
    """Format a field's current value for display and editing."""
    value = getattr(options, field.name)
    if field.kind == FieldKind.PATTERNS:
        return ", ".join(value)
    if field.kind == FieldKind.FLAG:
        return "yes" if value else "no"
    if field.kind == FieldKind.CHOICE:
        return value.value
    return str(value)


def parse_value(field: SettingsField, text: str) -> object:
    """Parse edited text into a field value.

    Args:
        field: Field being edited.
        text: Text typed by the operator.

    Returns:
        Value suitable for ScanOptions.

    Raises:
        ValueError: If the text is not a valid value for the field.
    """
    text = text.strip()
    if field.kind == FieldKind.NUMBER:
        if not text.isdigit():
            msg = f"{field.label} must be a non-negative integer"
            raise ValueError(msg)
        return int(text)
    if field.kind == FieldKind.SIZE:
        value = text or "0"
        try:
            parse_size(value)
        except InvalidSizeLimitError as e:
            raise ValueError(str(e)) from None
        return int(value) if value.isdigit() else value
    if field.kind == FieldKind.PATTERNS:
        patterns = tuple(p.strip() for p in text.split(",") if p.strip())
        for pattern in patterns:
            if not is_valid_pattern(pattern):
                msg = f"Invalid glob pattern: {pattern!r}"
                raise ValueError(msg)
        return patterns
    msg = f"{field.label} cannot be edited as text"
    raise ValueError(msg)


class SettingsView:
    """Edit a draft copy of scan options.

    The draft only reaches the session through a SettingsApplied intent;
    leaving with ``esc`` discards it.

    Args:
        options: Options to start from.
    """

    def __init__(self, options: ScanOptions) -> None:
        self.options = options
        self.focus = 0
        self.buffer: str | None = None
        self.error: str | None = None

    @property
    def field(self) -> SettingsField:
        """Field under the cursor."""
        return FIELDS[self.focus]

    @property
    def editing(self) -> bool:
        """True while a text value is being edited."""
        return self.buffer is not None

    def handle(self, key: str) -> Intent | None:
        if self.buffer is not None:
            self._edit(key, self.buffer)
            return None

        if key in ("up", "k"):
            self.focus = (self.focus - 1) % len(FIELDS)
        elif key in ("down", "j"):
            self.focus = (self.focus + 1) % len(FIELDS)
        elif key in ("enter", "space"):
            self._activate()
        elif key == "a":
            return SettingsApplied(self.options, save=False)
        elif key == "s":
            return SettingsApplied(self.options, save=True)
        return None

    def _activate(self) -> None:
        field = self.field
        self.error = None
        if field.kind == FieldKind.FLAG:
            current = getattr(self.options, field.name)
            self.options = self.options.with_changes(**{field.name: not current})
        elif field.kind == FieldKind.CHOICE:
            index = _SORT_ORDER.index(self.options.sort_by)
            self.options = self.options.with_changes(
                sort_by=_SORT_ORDER[(index + 1) % len(_SORT_ORDER)]
            )
        else:
            self.buffer = format_value(self.options, field)

    def _edit(self, key: str, buffer: str) -> None:
        if key == "enter":
            try:
                value = parse_value(self.field, buffer)
            except ValueError as e:
                self.error = str(e)
                return
            self.options = self.options.with_changes(**{self.field.name: value})
            self.buffer = None
            self.error = None
        elif key == "backspace":
            self.buffer = buffer[:-1]
        elif key == "space":
            self.buffer = buffer + " "
        elif len(key) == 1 and key.isprintable():
            self.buffer = buffer + key

    def render(self) -> RenderableType:
        table = Table.grid(padding=(0, 2))
        table.add_column(style="muted")
        table.add_column()
        for index, field in enumerate(FIELDS):
            focused = index == self.focus
            if focused and self.buffer is not None:
                value = Text(f"{self.buffer}▏", style="info")
            else:
                value = Text(format_value(self.options, field) or "-", style="text")
            label = Text(field.label, style="cursor" if focused else "muted")
            table.add_row(label, value)

        rows: list[RenderableType] = [table]
        if self.error:
            rows.append(Text(self.error, style="error"))
        rows.append(Text(HELP, style="muted"))
        return Panel(Group(*rows), title="Settings", border_style="border")

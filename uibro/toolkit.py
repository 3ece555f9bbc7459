"""
UIBro Toolkit - the UI-factory interface the interpreter drives

The interpreter only ever talks to a Toolkit. Native widget creation lives
behind it; RecordingToolkit keeps everything in memory, which is what the CLI
and the test-suite use.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .errors import ToolkitError
from .lexer import UI
from .values import ObjectKind

logger = logging.getLogger(__name__)

DEFAULTS = UI['defaults']


class Toolkit(ABC):
    """Operations the interpreter may issue, in program order, on its own thread."""

    @abstractmethod
    def create_window(self) -> Any:
        ...

    @abstractmethod
    def add_control(self, parent: Any, kind: ObjectKind, text: str) -> Any:
        ...

    @abstractmethod
    def set_title(self, obj: Any, title: str) -> None:
        ...

    @abstractmethod
    def set_position(self, obj: Any, x: int, y: int) -> None:
        ...

    @abstractmethod
    def set_size(self, obj: Any, width: int, height: int) -> None:
        ...

    @abstractmethod
    def set_text(self, obj: Any, text: str) -> None:
        ...

    @abstractmethod
    def set_id(self, obj: Any, identifier: str) -> None:
        ...

    @abstractmethod
    def set_visible(self, obj: Any, visible: bool) -> None:
        ...

    @abstractmethod
    def set_enabled(self, obj: Any, enabled: bool) -> None:
        ...

    @abstractmethod
    def center(self, obj: Any, enable: bool) -> None:
        ...

    @abstractmethod
    def set_default(self, obj: Any, is_default: bool) -> None:
        ...

    @abstractmethod
    def set_multiline(self, obj: Any, enable: bool) -> None:
        ...

    @abstractmethod
    def set_password(self, obj: Any, enable: bool) -> None:
        ...

    @abstractmethod
    def set_readonly(self, obj: Any, enable: bool) -> None:
        ...

    @abstractmethod
    def set_checked(self, obj: Any, checked: bool) -> None:
        ...

    @abstractmethod
    def add_item(self, obj: Any, item: str) -> None:
        ...

    @abstractmethod
    def set_selected_index(self, obj: Any, index: int) -> None:
        ...

    @abstractmethod
    def set_range(self, obj: Any, minimum: int, maximum: int) -> None:
        ...

    @abstractmethod
    def set_progress(self, obj: Any, value: int) -> None:
        ...

    @abstractmethod
    def set_font(self, obj: Any, size: int, weight: int, face: str) -> None:
        ...

    @abstractmethod
    def find_by_id(self, window: Any, identifier: str) -> Optional[Any]:
        """Return the control under the window whose id is set to identifier, or None."""
        ...

    @abstractmethod
    def notify(self, title: str, message: str, duration_ms: int, level: str) -> None:
        ...


@dataclass(eq=False)
class Widget:
    kind: ObjectKind
    text: str = ''
    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0
    parent: Optional['Widget'] = field(default=None, repr=False)
    children: List['Widget'] = field(default_factory=list, repr=False)
    properties: Dict[str, Any] = field(default_factory=dict)
    calls: List[Tuple[str, tuple]] = field(default_factory=list, repr=False)

    @property
    def position(self) -> Tuple[int, int]:
        return (self.x, self.y)

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)

    def descendants(self) -> Iterator['Widget']:
        stack = list(reversed(self.children))
        while stack:
            widget = stack.pop()
            yield widget
            stack.extend(reversed(widget.children))

    def last_call(self, name: str) -> Optional[tuple]:
        for call_name, args in reversed(self.calls):
            if call_name == name:
                return args
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'kind': self.kind.name.lower(),
            'text': self.text,
            'position': list(self.position),
            'size': list(self.size),
            'properties': dict(self.properties),
            'children': [child.to_dict() for child in self.children],
        }


@dataclass
class Notice:
    title: str
    message: str
    duration_ms: int
    level: str


class RecordingToolkit(Toolkit):
    """In-memory toolkit: every operation is applied to a Widget tree and logged."""

    def __init__(self, max_widgets: Optional[int] = None):
        self.max_widgets = max_widgets
        self.widgets: List[Widget] = []
        self.windows: List[Widget] = []
        self.notifications: List[Notice] = []

    def _allocate(self, kind: ObjectKind, text: str, parent: Optional[Widget]) -> Widget:
        if self.max_widgets is not None and len(self.widgets) >= self.max_widgets:
            raise ToolkitError(f"Failed to create {kind.name.lower()}: widget limit of {self.max_widgets} reached")
        widget = Widget(kind, text=text, parent=parent)
        self.widgets.append(widget)
        logger.debug("created %s %r", kind.name.lower(), text)
        return widget

    def _record(self, obj: Widget, name: str, *args):
        obj.calls.append((name, args))

    def create_window(self) -> Widget:
        window = self._allocate(ObjectKind.WINDOW, DEFAULTS['window']['title'], None)
        window.width = DEFAULTS['window']['width']
        window.height = DEFAULTS['window']['height']
        window.properties['centered'] = False
        self.windows.append(window)
        return window

    def add_control(self, parent: Widget, kind: ObjectKind, text: str) -> Widget:
        widget = self._allocate(kind, text, parent)
        widget.width, widget.height = DEFAULTS['controls'][kind.name]
        if kind == ObjectKind.PROGRESSBAR:
            widget.properties['range'] = tuple(DEFAULTS['progressRange'])
            widget.properties['value'] = 0
        elif kind == ObjectKind.COMBOBOX:
            widget.properties['items'] = []
            widget.properties['selected'] = -1
        parent.children.append(widget)
        self._record(parent, 'add', kind.name.lower(), text)
        return widget

    def set_title(self, obj, title):
        obj.text = title
        self._record(obj, 'title', title)

    def set_position(self, obj, x, y):
        obj.x, obj.y = x, y
        self._record(obj, 'position', x, y)

    def set_size(self, obj, width, height):
        obj.width, obj.height = width, height
        self._record(obj, 'size', width, height)

    def set_text(self, obj, text):
        obj.text = text
        self._record(obj, 'text', text)

    def set_id(self, obj, identifier):
        obj.properties['id'] = identifier
        self._record(obj, 'id', identifier)

    def set_visible(self, obj, visible):
        obj.properties['visible'] = visible
        self._record(obj, 'show', visible)

    def set_enabled(self, obj, enabled):
        obj.properties['enabled'] = enabled
        self._record(obj, 'enable', enabled)

    def center(self, obj, enable):
        obj.properties['centered'] = enable
        self._record(obj, 'center', enable)

    def set_default(self, obj, is_default):
        obj.properties['default'] = is_default
        self._record(obj, 'setDefault', is_default)

    def set_multiline(self, obj, enable):
        obj.properties['multiline'] = enable
        self._record(obj, 'multiline', enable)

    def set_password(self, obj, enable):
        obj.properties['password'] = enable
        self._record(obj, 'password', enable)

    def set_readonly(self, obj, enable):
        obj.properties['readonly'] = enable
        self._record(obj, 'readonly', enable)

    def set_checked(self, obj, checked):
        obj.properties['checked'] = checked
        self._record(obj, 'setChecked', checked)

    def add_item(self, obj, item):
        obj.properties['items'].append(item)
        self._record(obj, 'addItem', item)

    def set_selected_index(self, obj, index):
        obj.properties['selected'] = index
        self._record(obj, 'setSelectedIndex', index)

    def set_range(self, obj, minimum, maximum):
        obj.properties['range'] = (minimum, maximum)
        self._record(obj, 'setRange', minimum, maximum)

    def set_progress(self, obj, value):
        obj.properties['value'] = value
        self._record(obj, 'setValue', value)

    def set_font(self, obj, size, weight, face):
        obj.properties['font'] = (size, weight, face)
        self._record(obj, 'font', size, weight, face)

    def notify(self, title, message, duration_ms, level):
        self.notifications.append(Notice(title, message, duration_ms, level))
        logger.debug("notification [%s] %s: %s", level, title, message)

    def find_by_id(self, window, identifier):
        for widget in window.descendants():
            if widget.properties.get('id') == identifier:
                return widget
        return None

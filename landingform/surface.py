"""Form surface capability and submit events.

The handler never touches markup. It sees a form as something that can
register submit handlers, hand over its current field values, accept a hidden
field and reset itself. InMemoryForm implements that surface for tests and
for hosts that collect the values some other way.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from typing_extensions import Protocol, runtime_checkable


@dataclass
class SubmitEvent:
    """A form submit.

    Attributes:
        form: The form being submitted
        default_prevented: Whether the handler suppressed the native submit
    """
    form: "FormSurface"
    default_prevented: bool = False

    def prevent_default(self) -> None:
        """Suppress the native submit action."""
        self.default_prevented = True


SubmitHandler = Callable[[SubmitEvent], Any]


@runtime_checkable
class FormSurface(Protocol):
    """What the submission handler needs from a form."""

    def on_submit(self, handler: SubmitHandler) -> None:
        ...

    def fields(self) -> Dict[str, Any]:
        ...

    def add_hidden_field(self, name: str, value: str) -> None:
        ...

    def reset(self) -> None:
        ...


class InMemoryForm:
    """Form surface backed by a dict of field values.

    Hidden fields survive ``reset``; user-editable values do not.

    Examples:
        >>> form = InMemoryForm()
        >>> form.fill(name="Jane", email="jane@example.com")
        >>> form.fields()["name"]
        'Jane'
        >>> form.reset()
        >>> form.fields()
        {}
    """

    def __init__(self, values: Optional[Dict[str, Any]] = None):
        self._values: Dict[str, Any] = dict(values or {})
        self._hidden: Dict[str, str] = {}
        self._handlers: List[SubmitHandler] = []
        self.reset_count = 0

    def on_submit(self, handler: SubmitHandler) -> None:
        self._handlers.append(handler)

    def fields(self) -> Dict[str, Any]:
        merged = dict(self._hidden)
        merged.update(self._values)
        return merged

    def add_hidden_field(self, name: str, value: str) -> None:
        self._hidden[name] = value

    def reset(self) -> None:
        self._values.clear()
        self.reset_count += 1

    def fill(self, **values: Any) -> None:
        """Set user-editable field values."""
        self._values.update(values)

    def submit(self) -> SubmitEvent:
        """Dispatch a submit event to every registered handler, in order."""
        event = SubmitEvent(form=self)
        for handler in list(self._handlers):
            handler(event)
        return event

    @property
    def handler_count(self) -> int:
        return len(self._handlers)


__all__ = [
    "SubmitEvent",
    "SubmitHandler",
    "FormSurface",
    "InMemoryForm",
]

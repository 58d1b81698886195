import logging
from typing import Any, Callable, Optional, Union

from attrs import define, field

from dtable.constants import ActionVariant

logger = logging.getLogger(__name__)

RowPredicate = Callable[[Any], bool]


@define
class RowAction:
    """An action the user can trigger on a row, like edit or delete.

    Attributes:
        label: The text of the action.
        on_click: Called with the row and its index in the current page.
        variant: The visual flavor of the action.
        disabled: Either a flag or a predicate that receives the row.
        show: Predicate that receives the row; the action is only offered
            for rows where it returns `True`. No predicate means always.
        icon: An opaque icon reference passed on to the renderer.
    """

    label: str
    on_click: Callable[[Any, int], Any] = field(repr=False)
    variant: ActionVariant = field(default="secondary")
    disabled: Union[bool, RowPredicate] = field(default=False, repr=False)
    show: Optional[RowPredicate] = field(default=None, repr=False)
    icon: Any = field(default=None, repr=False)

    def is_shown(self, row: Any) -> bool:
        return self.show is None or bool(self.show(row))

    def is_disabled(self, row: Any) -> bool:
        if callable(self.disabled):
            return bool(self.disabled(row))
        return bool(self.disabled)

    def trigger(self, row: Any, row_index: int) -> bool:
        """Run the action for a row.

        Returns:
            False if the action is hidden or disabled for that row.
        """
        if not self.is_shown(row) or self.is_disabled(row):
            logger.debug("Action %s is not available for this row", self.label)
            return False
        self.on_click(row, row_index)
        return True

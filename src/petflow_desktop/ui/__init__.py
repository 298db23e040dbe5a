"""基于 Rich 的终端 UI 组件。"""

from petflow_desktop.ui.display import (
    THEME,
    show_error_panel,
    show_state,
    show_status_table,
)

__all__ = [
    "THEME",
    "show_error_panel",
    "show_state",
    "show_status_table",
]

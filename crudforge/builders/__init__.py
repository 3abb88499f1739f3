"""
Declarative configuration builders for dashboard forms, tables, panels,
widgets and resources.
"""

from crudforge.builders.form import (
    FormBuilder,
    FormConfig,
    FormField,
    FormInputType,
    FormSection,
    create_form,
    fields,
)
from crudforge.builders.panel import NavigationItem, PanelBuilder, PanelConfig, Role, create_panel
from crudforge.builders.resource import ResourceBuilder, ResourceDefinition
from crudforge.builders.table import (
    ColumnAction,
    ColumnType,
    RenderedCell,
    TableBuilder,
    TableColumn,
    TableConfig,
    columns,
    create_table,
    render_cell,
)
from crudforge.builders.widget import WidgetBuilder, WidgetConfig, WidgetType, create_widget, widgets

__all__ = [
    "ColumnAction",
    "ColumnType",
    "FormBuilder",
    "FormConfig",
    "FormField",
    "FormInputType",
    "FormSection",
    "NavigationItem",
    "PanelBuilder",
    "PanelConfig",
    "RenderedCell",
    "ResourceBuilder",
    "ResourceDefinition",
    "Role",
    "TableBuilder",
    "TableColumn",
    "TableConfig",
    "WidgetBuilder",
    "WidgetConfig",
    "WidgetType",
    "columns",
    "create_form",
    "create_panel",
    "create_table",
    "create_widget",
    "fields",
    "render_cell",
    "widgets",
]

"""
Crudforge Prompts - Interactive sessions for the generators

Walks an operator through naming a model and each of its fields. Invalid
answers are reported and asked again. Input comes from the terminal, or
from any object with readline() when a stream is injected.
"""

from __future__ import annotations

import re
from typing import Any, TextIO

from rich.console import Console
from rich.prompt import Confirm, IntPrompt, Prompt

from crudforge.spec import (
    AUDIT_FIELDS,
    FIELD_NAME_PATTERN,
    MODEL_NAME_PATTERN,
    EnhancedResource,
    FieldDescriptor,
    FieldType,
    FormFieldDefinition,
    FormFieldKind,
    OnDeleteAction,
    ResourceDescriptor,
    validate_default,
)


class _StrictStream:
    """
    Line reader for injected input.

    Blank lines come back as '' so prompts fall back to their default, the
    way they do at a terminal. End of input raises EOFError.
    """

    def __init__(self, stream: TextIO):
        self._stream = stream

    def readline(self) -> str:
        line = self._stream.readline()
        if not line:
            raise EOFError("Input ended before the session finished")
        return line.rstrip("\r\n")


class PromptSession:
    def __init__(self, console: Console | None = None, stream: TextIO | None = None, max_fields: int = 20):
        self.console = console or Console()
        self.stream: Any = _StrictStream(stream) if stream is not None else None
        self.max_fields = max_fields

    # ═══════════════════════════════════════════════════════════════════════
    # PRIMITIVES
    # ═══════════════════════════════════════════════════════════════════════

    def error(self, message: str) -> None:
        self.console.print(f"[red]{message}[/red]")

    def text(
        self,
        message: str,
        pattern: re.Pattern[str] | None = None,
        pattern_error: str = "Invalid value",
        default: str | None = None,
        required: bool = True,
    ) -> str:
        while True:
            if default is None:
                value = Prompt.ask(message, console=self.console, stream=self.stream)
            else:
                value = Prompt.ask(message, console=self.console, stream=self.stream, default=default)
            value = (value or "").strip()
            if not value:
                if not required:
                    return ""
                self.error("A value is required")
                continue
            if pattern is not None and not pattern.match(value):
                self.error(pattern_error)
                continue
            return value

    def choice(self, message: str, choices: list[str], default: str) -> str:
        return Prompt.ask(
            message,
            console=self.console,
            stream=self.stream,
            choices=choices,
            default=default,
        )

    def confirm(self, message: str, default: bool) -> bool:
        return Confirm.ask(message, console=self.console, stream=self.stream, default=default)

    def integer(self, message: str, minimum: int, maximum: int) -> int:
        while True:
            value = IntPrompt.ask(message, console=self.console, stream=self.stream)
            if value < minimum:
                self.error(f"Must be at least {minimum}")
            elif value > maximum:
                self.error(f"Maximum {maximum} allowed")
            else:
                return value

    # ═══════════════════════════════════════════════════════════════════════
    # MODEL SESSION
    # ═══════════════════════════════════════════════════════════════════════

    def model_name(self, message: str = "What is the name of your model?") -> str:
        return self.text(
            message,
            pattern=MODEL_NAME_PATTERN,
            pattern_error="Model name must start with uppercase and contain only letters",
        )

    def field_name(self, existing: set[str], message: str = "Field name") -> str:
        while True:
            name = self.text(
                message,
                pattern=FIELD_NAME_PATTERN,
                pattern_error="Field name must start with lowercase and contain only letters",
            )
            if name in AUDIT_FIELDS:
                self.error(f"{name} is added automatically")
            elif name in existing:
                self.error(f"Field {name} already exists")
            else:
                return name

    def field(self, existing: set[str]) -> FieldDescriptor:
        """Ask for one field."""
        data: dict[str, Any] = {"name": self.field_name(existing)}
        field_type = FieldType(
            self.choice("Field type", [t.value for t in FieldType], FieldType.STRING.value)
        )
        data["type"] = field_type

        if field_type == FieldType.RELATION:
            data["relation_model"] = self.model_name("Related model name")
            data["relation_field"] = self.text(
                "Field name in related model",
                pattern=FIELD_NAME_PATTERN,
                pattern_error="Field name must start with lowercase and contain only letters",
            )
            data["relation_on_delete"] = OnDeleteAction(
                self.choice(
                    "On delete behavior",
                    [a.value for a in OnDeleteAction],
                    OnDeleteAction.RESTRICT.value,
                )
            )

        data["is_required"] = self.confirm("Is this field required?", default=True)
        data["is_unique"] = self.confirm("Should this field be unique?", default=False)

        if field_type != FieldType.RELATION and self.confirm(
            "Does this field have a default value?", default=False
        ):
            while True:
                value = self.text("Default value")
                problem = validate_default(value, field_type)
                if problem is None:
                    break
                self.error(problem)
            data["has_default"] = True
            data["default_value"] = value

        return FieldDescriptor.model_validate(data)

    def resource(self) -> ResourceDescriptor:
        """Full create-model session."""
        self.console.print("\n[bold cyan]Model Creator[/bold cyan]\n")
        name = self.model_name()
        create_dashboard = self.confirm(
            "Would you like to create a dashboard page for this model?", default=True
        )
        count = self.integer("How many fields would you like to create?", 1, self.max_fields)

        fields: list[FieldDescriptor] = []
        for i in range(count):
            self.console.print(f"\n[yellow]Field {i + 1}/{count}[/yellow]")
            fields.append(self.field({f.name for f in fields}))

        if len(fields) < self.max_fields and self.confirm(
            "Would you like to add more fields?", default=False
        ):
            adding = True
            while adding and len(fields) < self.max_fields:
                self.console.print("\n[yellow]Additional Field[/yellow]")
                fields.append(self.field({f.name for f in fields}))
                if len(fields) < self.max_fields:
                    adding = self.confirm("Add another field?", default=False)
            if len(fields) >= self.max_fields:
                self.console.print(f"[dim]Reached the {self.max_fields} field limit[/dim]")

        return ResourceDescriptor(name=name, fields=fields, create_dashboard=create_dashboard)

    # ═══════════════════════════════════════════════════════════════════════
    # ENHANCED RESOURCE SESSION
    # ═══════════════════════════════════════════════════════════════════════

    def form_field(self, existing: set[str]) -> FormFieldDefinition:
        while True:
            name = self.text("Field name")
            if not name.isidentifier():
                self.error("Field name must be a valid identifier")
            elif name in existing:
                self.error(f"Field {name} already exists")
            else:
                break

        kind = FormFieldKind(
            self.choice("Field type", [k.value for k in FormFieldKind], FormFieldKind.TEXT.value)
        )
        label = self.text("Field label", default=name[:1].upper() + name[1:])
        required = self.confirm("Is this field required?", default=False)

        options = None
        if kind == FormFieldKind.SELECT:
            raw = self.text("Options (comma-separated)")
            options = [opt.strip() for opt in raw.split(",") if opt.strip()]

        placeholder = self.text("Placeholder text (optional)", required=False)
        helper_text = self.text("Helper text (optional)", required=False)

        return FormFieldDefinition(
            name=name,
            type=kind,
            label=label,
            required=required,
            options=options,
            placeholder=placeholder or None,
            helper_text=helper_text or None,
        )

    def enhanced_resource(self) -> EnhancedResource:
        """Full create-resource session."""
        self.console.print("\n[bold cyan]Enhanced Resource Generator[/bold cyan]\n")
        while True:
            name = self.text('Resource name (singular, e.g. "Post")')
            if name.isidentifier():
                break
            self.error("Resource name must be a valid identifier")
        plural_name = self.text('Plural name (e.g. "Posts")', default=name + "s")

        fields: list[FormFieldDefinition] = []
        while True:
            fields.append(self.form_field({f.name for f in fields}))
            if len(fields) >= self.max_fields or not self.confirm("Add another field?", default=True):
                break

        kinds = {f.type for f in fields}
        return EnhancedResource(
            name=name,
            plural_name=plural_name,
            fields=fields,
            enable_bulk_actions=self.confirm("Enable bulk actions (delete, export)?", default=True),
            enable_file_upload=self.confirm(
                "Include file upload examples?", default=FormFieldKind.FILE_UPLOAD in kinds
            ),
            enable_rich_editor=self.confirm(
                "Include rich editor examples?", default=FormFieldKind.RICH_EDITOR in kinds
            ),
            enable_dates=self.confirm("Include date field examples?", default=FormFieldKind.DATE in kinds),
        )

    # ═══════════════════════════════════════════════════════════════════════
    # OTHER QUESTIONS
    # ═══════════════════════════════════════════════════════════════════════

    def select_models(self, models: list[str]) -> list[str]:
        """Pick models by number or name; 'all' selects everything."""
        for i, model in enumerate(models, 1):
            self.console.print(f"  {i}. {model}")

        while True:
            answer = self.text("Select models to push (comma-separated)", default="all")
            if answer.lower() == "all":
                return list(models)

            selected: list[str] = []
            unknown: list[str] = []
            for token in (t.strip() for t in answer.split(",")):
                if not token:
                    continue
                if token.isdigit() and 1 <= int(token) <= len(models):
                    model = models[int(token) - 1]
                elif token in models:
                    model = token
                else:
                    unknown.append(token)
                    continue
                if model not in selected:
                    selected.append(model)

            if unknown:
                self.error(f"Unknown model(s): {', '.join(unknown)}")
            elif not selected:
                self.error("Select at least one model")
            else:
                return selected

    def confirm_fix(self) -> bool:
        return self.confirm("Would you like to automatically fix these issues?", default=True)

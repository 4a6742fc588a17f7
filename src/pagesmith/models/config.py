"""Configuration models for pagesmith."""

from pathlib import Path

from pydantic import BaseModel, Field, field_validator


def _default_page_path() -> str:
    return str(Path.home() / ".local" / "share" / "pagesmith" / "page.json")


class StorageConfig(BaseModel):
    """Where the edited page is kept."""

    page_path: str = Field(
        default_factory=_default_page_path,
        description="JSON file holding the page being edited"
    )

    export_name: str = Field(
        default="pagesmith-page.json",
        min_length=1,
        description="File name used when exporting into a directory"
    )

    @field_validator("page_path")
    @classmethod
    def expand_page_path(cls, v: str) -> str:
        """Expand ~ so the rest of the app deals with absolute paths."""
        return str(Path(v).expanduser())

    model_config = {"frozen": True}


class EditorConfig(BaseModel):
    """Editor defaults."""

    default_template: str = Field(
        default="campus",
        description="Template used by `pagesmith new` when none is given"
    )

    @field_validator("default_template")
    @classmethod
    def validate_template(cls, v: str) -> str:
        from pagesmith.templates import TEMPLATES

        if v not in TEMPLATES:
            raise ValueError(
                f"Unknown template: {v}\n"
                f"Available templates: {', '.join(sorted(TEMPLATES))}"
            )
        return v

    model_config = {"frozen": True}


class Config(BaseModel):
    """Root configuration for pagesmith."""

    storage: StorageConfig = Field(default_factory=StorageConfig, description="Storage settings")
    editor: EditorConfig = Field(default_factory=EditorConfig, description="Editor settings")

    model_config = {"frozen": True}
